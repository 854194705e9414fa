# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Object/ObjectMeta module"""

from __future__ import annotations

__all__ = ["Object", "ObjectMeta", "final"]

from abc import ABCMeta
from functools import cached_property
from itertools import chain
from typing import TYPE_CHECKING, Any, TypeVar

from typing_extensions import final


class ObjectMeta(ABCMeta):
    if TYPE_CHECKING:
        __Self = TypeVar("__Self", bound="ObjectMeta")

    __finalmethods__: frozenset[str]

    def __new__(
        mcs: type[__Self],
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        **kwargs: Any,
    ) -> __Self:
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        name = cls.__name__
        bases = cls.__bases__

        # Verify final bases
        if final_bases := [base for base in bases if vars(base).get("__final__", False)]:
            raise TypeError(
                f"{name!r}: Base classes marked as final class: {', '.join(base.__qualname__ for base in final_bases)}"
            )

        bases_final_methods_set: set[str] = set(
            chain.from_iterable(getattr(base, "__finalmethods__", ()) for base in cls.__mro__[1:])
        )

        # Verify final override
        if final_methods_overridden := [attr_name for attr_name in namespace if attr_name in bases_final_methods_set]:
            raise TypeError(
                f"{name!r}: These attributes would override final methods: {', '.join(map(repr, final_methods_overridden))}"
            )

        cls_final_methods: set[str] = {
            attr_name for attr_name, attr_obj in namespace.items() if ObjectMeta.__is_final_method(attr_obj)
        }
        cls.__finalmethods__ = frozenset(bases_final_methods_set | cls_final_methods)

        return cls

    def __setattr__(cls, name: str, value: Any, /) -> None:
        if name in getattr(cls, "__finalmethods__", ()):
            raise TypeError(f"Cannot override {name!r} method")
        return super().__setattr__(name, value)

    def __delattr__(cls, name: str) -> None:
        if name in getattr(cls, "__finalmethods__", ()):
            raise TypeError(f"Cannot override {name!r} method")
        return super().__delattr__(name)

    @staticmethod
    def __is_final_method(obj: Any) -> bool:
        try:
            if vars(obj).get("__final__", False):
                return True
        except TypeError:  # Do not have __dict__ attribute
            pass
        match obj:
            case property(fget=fget, fset=fset, fdel=fdel):
                return any(getattr(func, "__final__", False) for func in filter(callable, (fget, fset, fdel)))
            case classmethod(__func__=func) | staticmethod(__func__=func) | cached_property(func=func):
                return True if getattr(func, "__final__", False) else False
            case _:
                return False


class Object(metaclass=ObjectMeta):
    __slots__ = ()
