# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Transport primitives module

Thin layer over the standard library 'socket', 'selectors' and 'time' modules.
Operations that may not complete immediately return an Outcome instead of raising.
"""

from __future__ import annotations

__all__ = [
    "Outcome",
    "Status",
    "getaddrinfo",
    "getnameinfo",
    "inet_ntop",
    "inet_pton",
    "local_host_name",
    "monotonic_ms",
    "new_socket",
    "pending_bytes",
    "pending_error",
    "recv_into",
    "send",
    "set_blocking",
    "try_connect",
    "wait_writable",
]

import errno
import socket as _socket
import sys
import time
from enum import IntEnum, unique
from selectors import EVENT_WRITE
from socket import inet_ntop, inet_pton
from typing import TYPE_CHECKING, Any, Final, NamedTuple

try:
    from selectors import PollSelector as _Selector
except ImportError:  # Windows
    from selectors import SelectSelector as _Selector  # type: ignore[misc]

if TYPE_CHECKING:
    from _typeshed import WriteableBuffer


@unique
class Status(IntEnum):
    OK = 0
    WOULD_BLOCK = 1
    TIMED_OUT = 2
    INTERRUPTED = 3
    FATAL = 4

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"

    __str__ = __repr__


class Outcome(NamedTuple):
    status: Status
    value: int = 0  # Byte count on success, error number on failure


_CONNECT_IN_PROGRESS: Final[frozenset[int]] = frozenset(
    {
        errno.EINPROGRESS,
        errno.EWOULDBLOCK,
        errno.EALREADY,
        errno.EINTR,
        10035,  # WSAEWOULDBLOCK
    }
)


def new_socket(family: int) -> _socket.socket:
    return _socket.socket(family, _socket.SOCK_STREAM)


def set_blocking(sock: _socket.socket, flag: bool) -> None:
    sock.setblocking(flag)


def try_connect(sock: _socket.socket, sockaddr: tuple[Any, ...]) -> Outcome:
    try:
        code: int = sock.connect_ex(sockaddr)
    except OSError as exc:
        return Outcome(Status.FATAL, exc.errno or errno.EIO)
    if code == 0:
        return Outcome(Status.OK)
    if code in _CONNECT_IN_PROGRESS:
        return Outcome(Status.WOULD_BLOCK, code)
    return Outcome(Status.FATAL, code)


def wait_writable(sock: _socket.socket, timeout_ms: int) -> Outcome:
    with _Selector() as selector:
        selector.register(sock, EVENT_WRITE)
        try:
            ready = selector.select(timeout_ms / 1000)
        except InterruptedError:
            return Outcome(Status.INTERRUPTED, errno.EINTR)
        except OSError as exc:
            return Outcome(Status.FATAL, exc.errno or errno.EIO)
    if not ready:
        return Outcome(Status.TIMED_OUT, errno.ETIMEDOUT)
    return Outcome(Status.OK)


def pending_error(sock: _socket.socket) -> int:
    return sock.getsockopt(_socket.SOL_SOCKET, _socket.SO_ERROR)


def recv_into(sock: _socket.socket, buffer: WriteableBuffer, nbytes: int) -> Outcome:
    try:
        received: int = sock.recv_into(buffer, nbytes)
    except BlockingIOError as exc:
        return Outcome(Status.WOULD_BLOCK, exc.errno)
    except InterruptedError:
        return Outcome(Status.INTERRUPTED, errno.EINTR)
    except OSError as exc:
        return Outcome(Status.FATAL, exc.errno or errno.EIO)
    return Outcome(Status.OK, received)


def send(sock: _socket.socket, data: memoryview, flags: int = 0) -> Outcome:
    try:
        sent: int = sock.send(data, flags)
    except BlockingIOError as exc:
        return Outcome(Status.WOULD_BLOCK, exc.errno)
    except InterruptedError:
        return Outcome(Status.INTERRUPTED, errno.EINTR)
    except OSError as exc:
        return Outcome(Status.FATAL, exc.errno or errno.EIO)
    return Outcome(Status.OK, sent)


if sys.platform != "win32":
    import fcntl
    import struct
    import termios

    def pending_bytes(sock: _socket.socket) -> int:
        raw: bytes = fcntl.ioctl(sock.fileno(), termios.FIONREAD, b"\x00" * 4)
        count: int = struct.unpack("@i", raw)[0]
        return count

else:

    def pending_bytes(sock: _socket.socket) -> int:
        # FIONREAD is not exposed for sockets by the Windows 'socket.ioctl()'
        raise OSError(errno.EOPNOTSUPP, "Cannot query pending bytes on this platform")


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def getaddrinfo(hostname: str, flags: int = 0) -> list[tuple[int, tuple[Any, ...]]]:
    return [
        (family, sockaddr)
        for family, _, _, _, sockaddr in _socket.getaddrinfo(
            hostname, None, _socket.AF_UNSPEC, _socket.SOCK_STREAM, _socket.IPPROTO_TCP, flags
        )
        if family in (_socket.AF_INET, _socket.AF_INET6)
    ]


def getnameinfo(sockaddr: tuple[Any, ...], flags: int) -> str:
    host: str = _socket.getnameinfo(sockaddr, flags)[0]
    return host


def local_host_name() -> str:
    return _socket.gethostname()
