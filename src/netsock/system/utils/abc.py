# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Abstract classes utility module"""

from __future__ import annotations

__all__ = [
    "concreteclass",
    "isabstractclass",
]

from inspect import isabstract as isabstractclass
from typing import Any, TypeVar

_TT = TypeVar("_TT", bound=type)


def concreteclass(cls: _TT) -> _TT:
    """Class decorator: raise TypeError at definition time if 'cls' still has abstract methods"""
    if not isinstance(cls, type):
        raise TypeError("'cls' must be a type")
    if isabstractclass(cls):
        abstractmethods: Any = getattr(cls, "__abstractmethods__", set())
        raise TypeError(f"{cls.__name__} is an abstract class (abstract methods: {', '.join(sorted(abstractmethods))})")
    return cls
