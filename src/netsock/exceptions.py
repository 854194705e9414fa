# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network socket errors module"""

from __future__ import annotations

__all__ = [
    "IllegalStateError",
    "InvalidArgumentError",
    "SocketError",
    "SocketTimeoutError",
    "UnknownHostError",
]

import errno as _errno
import os


class SocketError(OSError):
    """Failure reported by the transport layer

    When built from an error number, 'errno' and 'strerror' are set as for any OSError.
    """

    @classmethod
    def from_errno(cls, code: int, message: str | None = None) -> SocketError:
        strerror = os.strerror(code)
        if message:
            strerror = f"{message}: {strerror}"
        return cls(code, strerror)

    @classmethod
    def from_os_error(cls, exc: OSError) -> SocketError:
        if exc.errno is None:
            return cls(str(exc) or type(exc).__name__)
        return cls(exc.errno, exc.strerror or os.strerror(exc.errno))


class SocketTimeoutError(SocketError, TimeoutError):
    def __init__(self, *args: object) -> None:
        if not args:
            args = (_errno.ETIMEDOUT, os.strerror(_errno.ETIMEDOUT))
        super().__init__(*args)


class UnknownHostError(SocketError):
    pass


class IllegalStateError(RuntimeError):
    pass


class InvalidArgumentError(ValueError):
    pass
