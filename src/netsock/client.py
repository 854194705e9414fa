# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network client socket module"""

from __future__ import annotations

__all__ = ["ClientSocket"]

import errno
import logging
from typing import TYPE_CHECKING, Any, Final

from .address import IPv4Address, IPv6Address, NetworkAddress, get_all_by_name
from .constants import AF_INET, AF_INET6, SocketOption
from .endpoint import SocketEndpoint
from .exceptions import IllegalStateError, InvalidArgumentError, SocketError, UnknownHostError
from .impl.base import AbstractSocketImpl, ImplFactorySlot, SocketImplFactory
from .impl.python import PythonSocketImpl
from .system.non_copyable import NonCopyable
from .system.object import final
from .tools.stream import SocketStreamBuffer

if TYPE_CHECKING:
    from typing import TypeVar

logger = logging.getLogger(__name__)

_IMPL_FACTORY: Final[ImplFactorySlot] = ImplFactorySlot("client")


def _any_local_address(family: int) -> NetworkAddress:
    return IPv6Address.ANY if family == AF_INET6 else IPv4Address.ANY


@final
class ClientSocket(NonCopyable):
    """Connection endpoint between two machines

    Lifecycle flags (created, bound, connected, closed, input/output shutdown) can only be set.
    The transport handle is created on the first operation which needs it.
    """

    __slots__ = (
        "__impl",
        "__created",
        "__bound",
        "__connected",
        "__closed",
        "__input_shutdown",
        "__output_shutdown",
        "__stream",
    )

    if TYPE_CHECKING:
        __Self = TypeVar("__Self", bound="ClientSocket")

    def __init__(self, *, prefer_ipv6: bool = False, impl: AbstractSocketImpl | None = None) -> None:
        super().__init__()
        if impl is None:
            impl = _IMPL_FACTORY.create_impl(PythonSocketImpl)
        impl.local_address = _any_local_address(AF_INET6 if prefer_ipv6 else AF_INET)
        self.__impl: AbstractSocketImpl = impl
        self.__created: bool = False
        self.__bound: bool = False
        self.__connected: bool = False
        self.__closed: bool = False
        self.__input_shutdown: bool = False
        self.__output_shutdown: bool = False
        self.__stream: SocketStreamBuffer | None = None

    @classmethod
    def create_connection(
        cls,
        host: str | NetworkAddress,
        port: int,
        *,
        local_address: NetworkAddress | None = None,
        local_port: int = 0,
        prefer_ipv6: bool = False,
        timeout_ms: int = 0,
    ) -> ClientSocket:
        """Connect to 'host' on 'port'

        When 'host' is a host name, every resolved address is tried, starting with those
        of the local address family, until one accepts the connection.
        """
        if isinstance(host, NetworkAddress):
            return cls.__startup(host, port, local_address, local_port, timeout_ms)

        family = local_address.family if local_address is not None else (AF_INET6 if prefer_ipv6 else AF_INET)
        addresses = get_all_by_name(host)
        candidates = [a for a in addresses if a.family == family] + [a for a in addresses if a.family != family]
        last_error: SocketError | None = None
        for address in candidates:
            try:
                return cls.__startup(address, port, local_address, local_port, timeout_ms)
            except SocketError as exc:
                logger.debug("Cannot connect to %s port %d", address, port, exc_info=exc)
                last_error = exc
        raise SocketError(f"Cannot connect to {host}") from last_error

    @classmethod
    def __startup(
        cls,
        address: NetworkAddress,
        port: int,
        local_address: NetworkAddress | None,
        local_port: int,
        timeout_ms: int,
    ) -> ClientSocket:
        remote = SocketEndpoint(address, port)
        self = cls(prefer_ipv6=address.family == AF_INET6)
        try:
            if local_address is not None or local_port:
                self.bind(SocketEndpoint(local_address or _any_local_address(address.family), local_port))
            self.connect(remote, timeout_ms)
        except BaseException:
            self.close()
            raise
        return self

    @classmethod
    def _accept_from(cls, server_impl: AbstractSocketImpl) -> ClientSocket:
        self = cls()
        try:
            server_impl.accept(self.__impl)
        except BaseException:
            self.close()
            raise
        self.__created = self.__bound = self.__connected = True
        return self

    @classmethod
    def set_socket_impl_factory(cls, factory: SocketImplFactory) -> None:
        _IMPL_FACTORY.install(factory)

    def __repr__(self) -> str:
        if self.__closed:
            return f"<{type(self).__name__} closed>"
        if not self.__connected:
            return f"<{type(self).__name__} unconnected>"
        return f"<{type(self).__name__} addr={self.remote_socket_address}, localport={self.local_port}>"

    def __enter__(self: __Self) -> __Self:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def bind(self, endpoint: SocketEndpoint | None = None) -> None:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        if self.__bound:
            raise IllegalStateError("Socket is already bound")
        if endpoint is None:
            endpoint = SocketEndpoint(_any_local_address(self.__family()), 0)
        address = endpoint.address
        if address is None:
            raise UnknownHostError(f"Unresolved address: {endpoint}")
        impl = self.__check_open_and_create(address.family)
        impl.bind(address, endpoint.port)
        self.__bound = True

    def connect(self, endpoint: SocketEndpoint, timeout_ms: int = 0) -> None:
        if timeout_ms < 0:
            raise InvalidArgumentError("Negative timeout")
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        if self.__connected:
            raise IllegalStateError("Socket is already connected")
        address = endpoint.address
        if address is None:
            raise UnknownHostError(f"Unresolved address: {endpoint}")
        try:
            impl = self.__check_open_and_create(address.family)
            if not self.__bound:
                impl.bind(_any_local_address(address.family), 0)
                self.__bound = True
            impl.connect(address, endpoint.port, timeout_ms)
        except BaseException:
            self.close()
            raise
        self.__connected = True

    def close(self) -> None:
        if self.__closed:
            return
        self.__closed = True
        try:
            self.__impl.close()
        except Exception as exc:
            logger.warning("Error while closing %r", self.__impl, exc_info=exc)

    def shutdown_input(self) -> None:
        if self.__input_shutdown:
            raise IllegalStateError("Socket input is already shutdown")
        self.__check_connected()
        self.__impl.shutdown_input()
        self.__input_shutdown = True

    def shutdown_output(self) -> None:
        if self.__output_shutdown:
            raise IllegalStateError("Socket output is already shutdown")
        self.__check_connected()
        self.__impl.shutdown_output()
        self.__output_shutdown = True

    def send_urgent_data(self, value: int) -> None:
        if not (0 <= value <= 0xFF):
            raise InvalidArgumentError(f"Urgent data must be a byte value, got {value}")
        impl = self.__check_connected()
        if not impl.supports_urgent_data():
            raise SocketError.from_errno(errno.EOPNOTSUPP, "Urgent data not supported")
        impl.send_urgent_data(value)

    def get_stream(self) -> SocketStreamBuffer:
        impl = self.__check_connected()
        if self.__stream is None:
            self.__stream = SocketStreamBuffer(impl)
        return self.__stream

    def fileno(self) -> int:
        if self.__closed or not self.__created:
            return -1
        return self.__impl.fileno()

    def get_keep_alive(self) -> bool:
        return self.__check_open_and_create().get_option_bool(SocketOption.KEEP_ALIVE)

    def set_keep_alive(self, on: bool) -> None:
        self.__check_open_and_create().set_option_bool(SocketOption.KEEP_ALIVE, on)

    def get_linger(self) -> int:
        """Return the linger timeout in seconds, or -1 when the option is disabled"""
        return self.__check_open_and_create().get_option_int(SocketOption.LINGER)

    def set_linger(self, on: bool, seconds: int = 0) -> None:
        impl = self.__check_open_and_create()
        if not on:
            return impl.set_option_bool(SocketOption.LINGER, False)
        if seconds < 0:
            raise InvalidArgumentError("Invalid value for linger")
        impl.set_option_int(SocketOption.LINGER, seconds)

    def get_oob_inline(self) -> bool:
        return self.__check_open_and_create().get_option_bool(SocketOption.OOB_INLINE)

    def set_oob_inline(self, on: bool) -> None:
        self.__check_open_and_create().set_option_bool(SocketOption.OOB_INLINE, on)

    def get_receive_buffer_size(self) -> int:
        return self.__check_open_and_create().get_option_int(SocketOption.RECEIVE_BUFFER_SIZE)

    def set_receive_buffer_size(self, size: int) -> None:
        impl = self.__check_open_and_create()
        if size <= 0:
            raise InvalidArgumentError("Invalid receive buffer size")
        impl.set_option_int(SocketOption.RECEIVE_BUFFER_SIZE, size)

    def get_send_buffer_size(self) -> int:
        return self.__check_open_and_create().get_option_int(SocketOption.SEND_BUFFER_SIZE)

    def set_send_buffer_size(self, size: int) -> None:
        impl = self.__check_open_and_create()
        if size <= 0:
            raise InvalidArgumentError("Invalid send buffer size")
        impl.set_option_int(SocketOption.SEND_BUFFER_SIZE, size)

    def get_receive_timeout(self) -> int:
        return self.__check_open_and_create().get_option_int(SocketOption.RECEIVE_TIMEOUT)

    def set_receive_timeout(self, timeout_ms: int) -> None:
        impl = self.__check_open_and_create()
        if timeout_ms < 0:
            raise InvalidArgumentError("Negative timeout")
        impl.set_option_int(SocketOption.RECEIVE_TIMEOUT, timeout_ms)

    def get_send_timeout(self) -> int:
        return self.__check_open_and_create().get_option_int(SocketOption.SEND_TIMEOUT)

    def set_send_timeout(self, timeout_ms: int) -> None:
        impl = self.__check_open_and_create()
        if timeout_ms < 0:
            raise InvalidArgumentError("Negative timeout")
        impl.set_option_int(SocketOption.SEND_TIMEOUT, timeout_ms)

    def get_tcp_no_delay(self) -> bool:
        return self.__check_open_and_create().get_option_bool(SocketOption.TCP_NO_DELAY)

    def set_tcp_no_delay(self, on: bool) -> None:
        self.__check_open_and_create().set_option_bool(SocketOption.TCP_NO_DELAY, on)

    def get_reuse_address(self) -> bool:
        return self.__check_open_and_create().get_option_bool(SocketOption.REUSE_ADDRESS)

    def set_reuse_address(self, on: bool) -> None:
        self.__check_open_and_create().set_option_bool(SocketOption.REUSE_ADDRESS, on)

    def get_traffic_class(self) -> int:
        return self.__check_open_and_create().get_option_int(SocketOption.TRAFFIC_CLASS)

    def set_traffic_class(self, traffic_class: int) -> None:
        impl = self.__check_open_and_create()
        if not (0 <= traffic_class <= 0xFF):
            raise InvalidArgumentError("Traffic class must be between 0 and 255")
        impl.set_option_int(SocketOption.TRAFFIC_CLASS, traffic_class)

    def is_connected(self) -> bool:
        return self.__connected

    def is_bound(self) -> bool:
        return self.__bound

    def is_closed(self) -> bool:
        return self.__closed

    def is_input_shutdown(self) -> bool:
        return self.__input_shutdown

    def is_output_shutdown(self) -> bool:
        return self.__output_shutdown

    @property
    def address(self) -> NetworkAddress | None:
        return self.__impl.address if self.__connected else None

    @property
    def port(self) -> int:
        return self.__impl.port if self.__connected else 0

    @property
    def local_address(self) -> NetworkAddress | None:
        return self.__impl.local_address if self.__bound else None

    @property
    def local_port(self) -> int:
        return self.__impl.local_port if self.__bound else 0

    @property
    def local_socket_address(self) -> SocketEndpoint | None:
        if not self.__bound:
            return None
        return SocketEndpoint(self.__impl.local_address, self.__impl.local_port)

    @property
    def remote_socket_address(self) -> SocketEndpoint | None:
        if not self.__connected:
            return None
        return SocketEndpoint(self.__impl.address, self.__impl.port)

    def __family(self) -> int:
        local_address = self.__impl.local_address
        return local_address.family if local_address is not None else AF_INET

    def __check_open_and_create(self, family: int | None = None) -> AbstractSocketImpl:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        impl = self.__impl
        if not self.__created:
            impl.create(family if family is not None else self.__family())
            self.__created = True
        return impl

    def __check_connected(self) -> AbstractSocketImpl:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        if not self.__connected:
            raise IllegalStateError("Socket is not connected")
        return self.__impl
