# -*- coding: utf-8 -*-
"""Contains the graph classes and the algorithms for optimal matchings in graphs."""

from importlib.metadata import version

from loguru import logger

# pylint: disable=wildcard-import
from . import graph
from . import neighbor_index
from . import matching

from .graph import *
from .neighbor_index import *
from .matching import *

__all__ = graph.__all__ + neighbor_index.__all__ + matching.__all__

__version__ = version(__name__)

logger.disable(__name__)
