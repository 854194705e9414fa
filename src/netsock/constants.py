# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network socket constants module"""

from __future__ import annotations

__all__ = [
    "AF_INET",
    "AF_INET6",
    "AddressFamily",
    "DEFAULT_BACKLOG",
    "DEFAULT_STREAM_BUFFER_SIZE",
    "EOF",
    "NI_NAMEREQD",
    "NI_NUMERICHOST",
    "NameInfoFlag",
    "SHUT_RD",
    "SHUT_RDWR",
    "SHUT_WR",
    "STREAM_PUTBACK_SIZE",
    "ShutdownFlag",
    "SocketOption",
]

import socket
from enum import IntEnum, IntFlag, auto, unique
from typing import Final, Literal


@unique
class AddressFamily(IntEnum):
    AF_INET = socket.AF_INET
    AF_INET6 = socket.AF_INET6

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"

    __str__ = __repr__


@unique
class ShutdownFlag(IntEnum):
    SHUT_RD = socket.SHUT_RD
    SHUT_RDWR = socket.SHUT_RDWR
    SHUT_WR = socket.SHUT_WR

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"

    __str__ = __repr__


class NameInfoFlag(IntFlag):
    NI_NUMERICHOST = socket.NI_NUMERICHOST
    NI_NAMEREQD = socket.NI_NAMEREQD

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"

    __str__ = __repr__


@unique
class SocketOption(IntEnum):
    """Options understood by socket implementations

    Boolean options: REUSE_ADDRESS, KEEP_ALIVE, OOB_INLINE, TCP_NO_DELAY, LINGER (disable only).
    Integer options: RECEIVE_BUFFER_SIZE, SEND_BUFFER_SIZE, RECEIVE_TIMEOUT, SEND_TIMEOUT (milliseconds),
    LINGER (seconds, -1 when disabled), TRAFFIC_CLASS.
    """

    REUSE_ADDRESS = auto()
    RECEIVE_BUFFER_SIZE = auto()
    SEND_BUFFER_SIZE = auto()
    RECEIVE_TIMEOUT = auto()
    SEND_TIMEOUT = auto()
    KEEP_ALIVE = auto()
    LINGER = auto()
    OOB_INLINE = auto()
    TCP_NO_DELAY = auto()
    TRAFFIC_CLASS = auto()

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"

    __str__ = __repr__


AF_INET: Final[Literal[AddressFamily.AF_INET]] = AddressFamily.AF_INET
AF_INET6: Final[Literal[AddressFamily.AF_INET6]] = AddressFamily.AF_INET6
SHUT_RD: Final[Literal[ShutdownFlag.SHUT_RD]] = ShutdownFlag.SHUT_RD
SHUT_RDWR: Final[Literal[ShutdownFlag.SHUT_RDWR]] = ShutdownFlag.SHUT_RDWR
SHUT_WR: Final[Literal[ShutdownFlag.SHUT_WR]] = ShutdownFlag.SHUT_WR
NI_NUMERICHOST: Final[Literal[NameInfoFlag.NI_NUMERICHOST]] = NameInfoFlag.NI_NUMERICHOST
NI_NAMEREQD: Final[Literal[NameInfoFlag.NI_NAMEREQD]] = NameInfoFlag.NI_NAMEREQD

DEFAULT_BACKLOG: Final[int] = 50
DEFAULT_STREAM_BUFFER_SIZE: Final[int] = 1024
STREAM_PUTBACK_SIZE: Final[int] = 2
EOF: Final[int] = -1


del socket
