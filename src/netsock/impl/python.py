# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network python socket implementation module"""

from __future__ import annotations

__all__ = [
    "PythonServerSocketImpl",
    "PythonSocketImpl",
]

import errno
import logging
import os
import socket as _socket
import struct
from typing import TYPE_CHECKING, Any, Final

from .. import _transport
from .._transport import Outcome, Status
from ..address import NetworkAddress, address_from_sockaddr, get_local_host
from ..constants import AF_INET, AF_INET6, EOF, SHUT_RD, SHUT_WR, AddressFamily, SocketOption
from ..exceptions import IllegalStateError, InvalidArgumentError, SocketError, SocketTimeoutError
from ..system.object import final
from ..system.utils.abc import concreteclass
from .base import AbstractSocketImpl

try:
    from socket import IPV6_TCLASS
except ImportError:
    IPV6_TCLASS = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from _typeshed import WriteableBuffer

logger = logging.getLogger(__name__)

_BOOL_OPTIONS: Final[dict[SocketOption, tuple[int, int]]] = {
    SocketOption.REUSE_ADDRESS: (_socket.SOL_SOCKET, _socket.SO_REUSEADDR),
    SocketOption.KEEP_ALIVE: (_socket.SOL_SOCKET, _socket.SO_KEEPALIVE),
    SocketOption.OOB_INLINE: (_socket.SOL_SOCKET, _socket.SO_OOBINLINE),
    SocketOption.TCP_NO_DELAY: (_socket.IPPROTO_TCP, _socket.TCP_NODELAY),
}

_BUFFER_SIZE_OPTIONS: Final[dict[SocketOption, tuple[int, int]]] = {
    SocketOption.RECEIVE_BUFFER_SIZE: (_socket.SOL_SOCKET, _socket.SO_RCVBUF),
    SocketOption.SEND_BUFFER_SIZE: (_socket.SOL_SOCKET, _socket.SO_SNDBUF),
}

_TIMEOUT_OPTIONS: Final[dict[SocketOption, tuple[int, int]]] = {
    SocketOption.RECEIVE_TIMEOUT: (_socket.SOL_SOCKET, _socket.SO_RCVTIMEO),
    SocketOption.SEND_TIMEOUT: (_socket.SOL_SOCKET, _socket.SO_SNDTIMEO),
}

_LINGER_STRUCT: Final[struct.Struct] = struct.Struct("@ii")

if os.name == "nt":
    _TIMEOUT_STRUCT = struct.Struct("@I")  # DWORD, in milliseconds

    def _encode_timeout(timeout_ms: int) -> bytes:
        return _TIMEOUT_STRUCT.pack(timeout_ms)

    def _decode_timeout(raw: bytes) -> int:
        timeout_ms: int = _TIMEOUT_STRUCT.unpack(raw)[0]
        return timeout_ms

else:
    _TIMEOUT_STRUCT = struct.Struct("@ll")  # struct timeval

    def _encode_timeout(timeout_ms: int) -> bytes:
        seconds, milliseconds = divmod(timeout_ms, 1000)
        return _TIMEOUT_STRUCT.pack(seconds, milliseconds * 1000)

    def _decode_timeout(raw: bytes) -> int:
        seconds, microseconds = _TIMEOUT_STRUCT.unpack(raw)
        return seconds * 1000 + microseconds // 1000


@concreteclass
class PythonSocketImpl(AbstractSocketImpl):
    __slots__ = ("__socket", "__input_shutdown")

    def __init__(self) -> None:
        super().__init__()
        self.__socket: _socket.socket | None = None
        self.__input_shutdown: bool = False

    def __del__(self) -> None:
        try:
            sock = self.__socket
        except AttributeError:  # __init__() failed
            return
        if sock is not None:
            self.close()

    def __repr__(self) -> str:
        sock = self.__socket
        if sock is None:
            return f"<{type(self).__name__} closed>"
        try:
            laddr: Any = sock.getsockname()
        except OSError:
            return f"<{type(self).__name__} fd={sock.fileno()}, family={AddressFamily(sock.family)}>"
        return f"<{type(self).__name__} fd={sock.fileno()}, family={AddressFamily(sock.family)}, laddr={laddr}>"

    def create(self, family: int) -> None:
        family = AddressFamily(family)
        if self.__socket is not None:
            raise IllegalStateError("Socket already created")
        try:
            self.__socket = _transport.new_socket(family)
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc
        self.__input_shutdown = False

    @final
    def is_open(self) -> bool:
        return self.__socket is not None

    @final
    def close(self) -> None:
        sock, self.__socket = self.__socket, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as exc:
            logger.warning("Error while closing %r", sock, exc_info=exc)

    @final
    def fileno(self) -> int:
        return self.__get_socket().fileno()

    @final
    def get_native_socket(self) -> _socket.socket | None:
        return self.__socket

    @final
    def set_native_socket(self, sock: _socket.socket) -> None:
        if self.__socket is not None:
            raise IllegalStateError("Socket already created")
        self.__socket = sock
        self.__input_shutdown = False

    @final
    def bind(self, address: NetworkAddress, port: int) -> None:
        sock = self.__get_socket()
        try:
            sock.bind(address.to_sockaddr(port))
            if port == 0:
                port = sock.getsockname()[1]
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc
        self.local_address = address
        self.local_port = port

    @final
    def listen(self, backlog: int) -> None:
        sock = self.__get_socket()
        try:
            sock.listen(backlog)
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc

    @final
    def accept(self, new_impl: AbstractSocketImpl) -> None:
        sock = self.__get_socket()
        client: _socket.socket
        sockaddr: tuple[Any, ...]
        try:
            client, sockaddr = sock.accept()
        except BlockingIOError as exc:
            raise SocketTimeoutError(errno.ETIMEDOUT, "Accept timed out") from exc
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc
        try:
            new_impl.set_native_socket(client)
            new_impl.address = address_from_sockaddr(client.family, sockaddr)
            new_impl.port = sockaddr[1]
            try:
                local_sockaddr: tuple[Any, ...] = client.getsockname()
            except OSError as exc:
                raise SocketError.from_os_error(exc) from exc
            new_impl.local_port = local_sockaddr[1]
            new_impl.local_address = address_from_sockaddr(client.family, local_sockaddr)
        except BaseException:
            client.close()
            raise

    @final
    def connect(self, address: NetworkAddress, port: int, timeout_ms: int = 0) -> None:
        if timeout_ms < 0:
            raise InvalidArgumentError("Negative timeout")
        sock = self.__get_socket()
        if address.is_any_local_address():
            address = get_local_host(prefer_ipv6=address.family == AF_INET6)
        sockaddr = address.to_sockaddr(port)
        if timeout_ms == 0:
            try:
                sock.connect(sockaddr)
            except OSError as exc:
                raise SocketError.from_os_error(exc) from exc
        else:
            self.__connect_with_timeout(sock, sockaddr, timeout_ms)
        self.address = address
        self.port = port
        try:
            local_sockaddr: tuple[Any, ...] = sock.getsockname()
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc
        self.local_port = local_sockaddr[1]
        if self.local_address is None:
            self.local_address = address_from_sockaddr(sock.family, local_sockaddr)

    def __connect_with_timeout(self, sock: _socket.socket, sockaddr: tuple[Any, ...], timeout_ms: int) -> None:
        _transport.set_blocking(sock, False)
        try:
            match _transport.try_connect(sock, sockaddr):
                case Outcome(Status.OK, _):
                    return
                case Outcome(Status.WOULD_BLOCK, _):
                    pass
                case Outcome(_, code):
                    raise SocketError.from_errno(code, "Cannot connect")

            deadline: int = _transport.monotonic_ms() + timeout_ms
            while True:
                remaining: int = deadline - _transport.monotonic_ms()
                if remaining <= 0:
                    raise SocketTimeoutError(errno.ETIMEDOUT, "Connect timed out")
                match _transport.wait_writable(sock, remaining):
                    case Outcome(Status.OK, _):
                        break
                    case Outcome(Status.INTERRUPTED, _):
                        continue
                    case Outcome(Status.TIMED_OUT, _):
                        raise SocketTimeoutError(errno.ETIMEDOUT, "Connect timed out")
                    case Outcome(_, code):
                        raise SocketError.from_errno(code, "Cannot connect")

            try:
                pending: int = _transport.pending_error(sock)
            except OSError as exc:
                raise SocketError.from_os_error(exc) from exc
            match pending:
                case 0:
                    return
                case errno.ETIMEDOUT:
                    raise SocketTimeoutError(errno.ETIMEDOUT, "Connect timed out")
                case code:
                    raise SocketError.from_errno(code, "Cannot connect")
        finally:
            if self.__socket is sock:
                _transport.set_blocking(sock, True)

    @final
    def read(self, buffer: WriteableBuffer) -> int:
        nbytes: int = memoryview(buffer).nbytes
        if nbytes == 0:
            return 0
        if self.__input_shutdown:
            return EOF
        sock = self.__get_socket()
        outcome = _transport.recv_into(sock, buffer, nbytes)
        match outcome.status:
            case Status.OK if outcome.value == 0:
                # Peer closed its side
                self.__input_shutdown = True
                return EOF
            case Status.OK:
                return outcome.value
            case Status.WOULD_BLOCK | Status.INTERRUPTED:
                return 0
        raise SocketError.from_errno(outcome.value, "Read failed")

    @final
    def write(self, data: bytes | bytearray | memoryview) -> None:
        sock = self.__get_socket()
        remaining = memoryview(data).cast("B")
        while len(remaining) > 0:
            match _transport.send(sock, remaining):
                case Outcome(Status.OK, sent):
                    remaining = remaining[sent:]
                case Outcome(Status.INTERRUPTED, _):
                    continue
                case Outcome(Status.WOULD_BLOCK, _):
                    raise SocketTimeoutError(errno.ETIMEDOUT, "Write timed out")
                case Outcome(_, code):
                    raise SocketError.from_errno(code, "Write failed")

    @final
    def available(self) -> int:
        if self.__input_shutdown:
            return 0
        sock = self.__get_socket()
        try:
            return max(_transport.pending_bytes(sock), 0)
        except OSError:
            return 0

    @final
    def shutdown_input(self) -> None:
        sock = self.__get_socket()
        try:
            sock.shutdown(SHUT_RD)
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc
        self.__input_shutdown = True

    @final
    def shutdown_output(self) -> None:
        sock = self.__get_socket()
        try:
            sock.shutdown(SHUT_WR)
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc

    @final
    def supports_urgent_data(self) -> bool:
        return True

    @final
    def send_urgent_data(self, value: int) -> None:
        sock = self.__get_socket()
        with memoryview(bytes([value & 0xFF])) as data:
            match _transport.send(sock, data, _socket.MSG_OOB):
                case Outcome(Status.OK, _):
                    return
                case Outcome(Status.WOULD_BLOCK, _):
                    raise SocketTimeoutError(errno.ETIMEDOUT, "Write timed out")
                case Outcome(_, code):
                    raise SocketError.from_errno(code, "Cannot send urgent data")

    @final
    def get_option_bool(self, option: SocketOption) -> bool:
        option = SocketOption(option)
        if option == SocketOption.LINGER:
            return self.get_option_int(option) >= 0
        try:
            level, name = _BOOL_OPTIONS[option]
        except KeyError:
            raise InvalidArgumentError(f"{option} is not a boolean option") from None
        return bool(self.__getsockopt(level, name))

    @final
    def set_option_bool(self, option: SocketOption, value: bool) -> None:
        option = SocketOption(option)
        if option == SocketOption.LINGER:
            if value:
                raise InvalidArgumentError("LINGER must be enabled with a timeout")
            return self.__setsockopt(_socket.SOL_SOCKET, _socket.SO_LINGER, _LINGER_STRUCT.pack(0, 0))
        try:
            level, name = _BOOL_OPTIONS[option]
        except KeyError:
            raise InvalidArgumentError(f"{option} is not a boolean option") from None
        return self.__setsockopt(level, name, 1 if value else 0)

    @final
    def get_option_int(self, option: SocketOption) -> int:
        option = SocketOption(option)
        match option:
            case SocketOption.LINGER:
                raw: bytes = self.__getsockopt(_socket.SOL_SOCKET, _socket.SO_LINGER, _LINGER_STRUCT.size)
                enabled, seconds = _LINGER_STRUCT.unpack(raw)
                return seconds if enabled else -1
            case SocketOption.TRAFFIC_CLASS:
                return self.__getsockopt(*self.__traffic_class_option())
            case _ if option in _TIMEOUT_OPTIONS:
                level, name = _TIMEOUT_OPTIONS[option]
                return _decode_timeout(self.__getsockopt(level, name, _TIMEOUT_STRUCT.size))
            case _ if option in _BUFFER_SIZE_OPTIONS:
                return self.__getsockopt(*_BUFFER_SIZE_OPTIONS[option])
            case _:
                raise InvalidArgumentError(f"{option} is not an integer option")

    @final
    def set_option_int(self, option: SocketOption, value: int) -> None:
        option = SocketOption(option)
        match option:
            case SocketOption.LINGER:
                if value < 0:
                    raise InvalidArgumentError("Negative linger timeout")
                return self.__setsockopt(_socket.SOL_SOCKET, _socket.SO_LINGER, _LINGER_STRUCT.pack(1, value))
            case SocketOption.TRAFFIC_CLASS:
                return self.__setsockopt(*self.__traffic_class_option(), value)
            case _ if option in _TIMEOUT_OPTIONS:
                if value < 0:
                    raise InvalidArgumentError("Negative timeout")
                level, name = _TIMEOUT_OPTIONS[option]
                return self.__setsockopt(level, name, _encode_timeout(value))
            case _ if option in _BUFFER_SIZE_OPTIONS:
                return self.__setsockopt(*_BUFFER_SIZE_OPTIONS[option], value)
            case _:
                raise InvalidArgumentError(f"{option} is not an integer option")

    def __get_socket(self) -> _socket.socket:
        sock = self.__socket
        if sock is None:
            raise IllegalStateError("Closed socket")
        return sock

    def __traffic_class_option(self) -> tuple[int, int]:
        sock = self.__get_socket()
        if sock.family == AF_INET:
            return (_socket.IPPROTO_IP, _socket.IP_TOS)
        if IPV6_TCLASS is None:
            raise SocketError.from_errno(errno.ENOPROTOOPT, "IPV6_TCLASS")
        return (_socket.IPPROTO_IPV6, IPV6_TCLASS)

    def __getsockopt(self, level: int, name: int, buflen: int = 0) -> Any:
        sock = self.__get_socket()
        try:
            if buflen:
                return sock.getsockopt(level, name, buflen)
            return sock.getsockopt(level, name)
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc

    def __setsockopt(self, level: int, name: int, value: int | bytes) -> None:
        sock = self.__get_socket()
        try:
            sock.setsockopt(level, name, value)
        except OSError as exc:
            raise SocketError.from_os_error(exc) from exc


@final
@concreteclass
class PythonServerSocketImpl(PythonSocketImpl):
    __slots__ = ()

    def create(self, family: int) -> None:
        super().create(family)
        if os.name not in ("nt", "cygwin"):
            try:
                self.set_option_bool(SocketOption.REUSE_ADDRESS, True)
            except SocketError as exc:
                logger.debug("Cannot enable address reuse", exc_info=exc)
