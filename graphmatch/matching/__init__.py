# -*- coding: utf-8 -*-
"""Contains the matching algorithms in the submodules."""

from . import _common
from . import kuhn_munkres
from . import blossom

# pylint: disable=wildcard-import
from ._common import *
from .kuhn_munkres import *
from .blossom import *

__all__ = _common.__all__ + kuhn_munkres.__all__ + blossom.__all__
