# -*- coding: utf-8 -*-
import pytest

import graphmatch


@pytest.fixture(autouse=True)
def add_default_names(doctest_namespace):
    for name in graphmatch.__all__:
        doctest_namespace[name] = getattr(graphmatch, name)
