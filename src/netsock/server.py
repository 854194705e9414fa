# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network server socket module"""

from __future__ import annotations

__all__ = ["ServerSocket"]

import logging
from typing import TYPE_CHECKING, Any, Final

from .address import IPv4Address, IPv6Address, NetworkAddress
from .client import ClientSocket
from .constants import AF_INET6, DEFAULT_BACKLOG, SocketOption
from .endpoint import SocketEndpoint
from .exceptions import IllegalStateError, InvalidArgumentError, UnknownHostError
from .impl.base import AbstractSocketImpl, ImplFactorySlot, SocketImplFactory
from .impl.python import PythonServerSocketImpl
from .system.non_copyable import NonCopyable
from .system.object import final

if TYPE_CHECKING:
    from typing import TypeVar

logger = logging.getLogger(__name__)

_IMPL_FACTORY: Final[ImplFactorySlot] = ImplFactorySlot("server")


@final
class ServerSocket(NonCopyable):
    """Listening socket waiting for incoming connections

    When 'port' is given, the socket is bound to 'local_address' (the wildcard address by default)
    and starts listening at construction. 'port' 0 selects an ephemeral port.
    """

    __slots__ = ("__impl", "__family", "__bound", "__closed")

    if TYPE_CHECKING:
        __Self = TypeVar("__Self", bound="ServerSocket")

    def __init__(
        self,
        port: int | None = None,
        *,
        backlog: int = DEFAULT_BACKLOG,
        local_address: NetworkAddress | None = None,
        prefer_ipv6: bool = False,
    ) -> None:
        super().__init__()
        if local_address is None:
            local_address = IPv6Address.ANY if prefer_ipv6 else IPv4Address.ANY
        endpoint = SocketEndpoint(local_address, port) if port is not None else None
        self.__impl: AbstractSocketImpl = _IMPL_FACTORY.create_impl(PythonServerSocketImpl)
        self.__family: int = local_address.family
        self.__bound: bool = False
        self.__closed: bool = False
        try:
            self.__impl.create(self.__family)
            if endpoint is not None:
                self.bind(endpoint, backlog)
        except BaseException:
            self.close()
            raise

    @classmethod
    def set_socket_impl_factory(cls, factory: SocketImplFactory) -> None:
        _IMPL_FACTORY.install(factory)

    def __repr__(self) -> str:
        if self.__closed:
            return f"<{type(self).__name__} closed>"
        if not self.__bound:
            return f"<{type(self).__name__} unbound>"
        return f"<{type(self).__name__} addr={self.local_socket_address}>"

    def __enter__(self: __Self) -> __Self:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def bind(self, endpoint: SocketEndpoint | None = None, backlog: int = DEFAULT_BACKLOG) -> None:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        if self.__bound:
            raise IllegalStateError("Socket is already bound")
        if endpoint is None:
            endpoint = SocketEndpoint(IPv6Address.ANY if self.__family == AF_INET6 else IPv4Address.ANY, 0)
        address = endpoint.address
        if address is None:
            raise UnknownHostError(f"Unresolved address: {endpoint}")
        if backlog < 1:
            backlog = DEFAULT_BACKLOG
        try:
            self.__impl.bind(address, endpoint.port)
            self.__impl.listen(backlog)
        except BaseException:
            self.close()
            raise
        self.__bound = True

    def accept(self) -> ClientSocket:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        if not self.__bound:
            raise IllegalStateError("Socket is not bound yet")
        return ClientSocket._accept_from(self.__impl)

    def close(self) -> None:
        if self.__closed:
            return
        self.__closed = True
        try:
            self.__impl.close()
        except Exception as exc:
            logger.warning("Error while closing %r", self.__impl, exc_info=exc)

    def fileno(self) -> int:
        if self.__closed:
            return -1
        return self.__impl.fileno()

    def get_reuse_address(self) -> bool:
        return self.__check_open().get_option_bool(SocketOption.REUSE_ADDRESS)

    def set_reuse_address(self, on: bool) -> None:
        self.__check_open().set_option_bool(SocketOption.REUSE_ADDRESS, on)

    def get_receive_buffer_size(self) -> int:
        return self.__check_open().get_option_int(SocketOption.RECEIVE_BUFFER_SIZE)

    def set_receive_buffer_size(self, size: int) -> None:
        impl = self.__check_open()
        if size <= 0:
            raise InvalidArgumentError("Invalid receive buffer size")
        impl.set_option_int(SocketOption.RECEIVE_BUFFER_SIZE, size)

    def get_receive_timeout(self) -> int:
        return self.__check_open().get_option_int(SocketOption.RECEIVE_TIMEOUT)

    def set_receive_timeout(self, timeout_ms: int) -> None:
        impl = self.__check_open()
        if timeout_ms < 0:
            raise InvalidArgumentError("Negative timeout")
        impl.set_option_int(SocketOption.RECEIVE_TIMEOUT, timeout_ms)

    def is_bound(self) -> bool:
        return self.__bound

    def is_closed(self) -> bool:
        return self.__closed

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

    def __check_open(self) -> AbstractSocketImpl:
        if self.__closed:
            raise IllegalStateError("Socket is closed")
        return self.__impl
