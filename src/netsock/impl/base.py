# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network abstract socket implementation module"""

from __future__ import annotations

__all__ = [
    "AbstractSocketImpl",
    "ImplFactorySlot",
    "SocketImplFactory",
]

import logging
from abc import abstractmethod
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable

from ..address import NetworkAddress, get_by_name
from ..constants import AF_INET6, SocketOption
from ..exceptions import IllegalStateError
from ..system.non_copyable import NonCopyable
from ..system.object import Object, final

if TYPE_CHECKING:
    from socket import socket as _Socket

    from _typeshed import WriteableBuffer

logger = logging.getLogger(__name__)


class AbstractSocketImpl(NonCopyable):
    """Socket implementation used by ClientSocket and ServerSocket

    Holds the transport handle and the endpoints it was bound or connected to.
    Every operation raises SocketError (or a subclass) when the transport reports a failure.
    """

    __slots__ = ("__address", "__port", "__local_address", "__local_port")

    def __init__(self) -> None:
        super().__init__()
        self.__address: NetworkAddress | None = None
        self.__port: int = 0
        self.__local_address: NetworkAddress | None = None
        self.__local_port: int = 0

    def __enter__(self) -> AbstractSocketImpl:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @abstractmethod
    def create(self, family: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def is_open(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release the transport handle. Calling it again does nothing."""
        raise NotImplementedError

    @abstractmethod
    def bind(self, address: NetworkAddress, port: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def listen(self, backlog: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def accept(self, new_impl: AbstractSocketImpl) -> None:
        raise NotImplementedError

    @abstractmethod
    def connect(self, address: NetworkAddress, port: int, timeout_ms: int = 0) -> None:
        """Connect to 'address' and 'port'

        A null 'timeout_ms' waits for the transport to give up, otherwise SocketTimeoutError is raised
        once 'timeout_ms' milliseconds have elapsed.
        """
        raise NotImplementedError

    def connect_to_host(self, hostname: str, port: int, timeout_ms: int = 0) -> None:
        local_address = self.local_address
        address = get_by_name(hostname, prefer_ipv6=local_address is not None and local_address.family == AF_INET6)
        return self.connect(address, port, timeout_ms)

    @abstractmethod
    def read(self, buffer: WriteableBuffer) -> int:
        """Receive at most len(buffer) bytes

        Returns the number of bytes written in 'buffer', 0 if nothing could be read before the
        receive timeout, or EOF (-1) once the input side is closed.
        """
        raise NotImplementedError

    @abstractmethod
    def write(self, data: bytes | bytearray | memoryview) -> None:
        raise NotImplementedError

    @abstractmethod
    def available(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def shutdown_input(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def shutdown_output(self) -> None:
        raise NotImplementedError

    def supports_urgent_data(self) -> bool:
        return False

    @abstractmethod
    def send_urgent_data(self, value: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_option_bool(self, option: SocketOption) -> bool:
        raise NotImplementedError

    @abstractmethod
    def set_option_bool(self, option: SocketOption, value: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_option_int(self, option: SocketOption) -> int:
        raise NotImplementedError

    @abstractmethod
    def set_option_int(self, option: SocketOption, value: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_native_socket(self) -> _Socket | None:
        raise NotImplementedError

    @abstractmethod
    def set_native_socket(self, sock: _Socket) -> None:
        raise NotImplementedError

    @abstractmethod
    def fileno(self) -> int:
        raise NotImplementedError

    @property
    @final
    def address(self) -> NetworkAddress | None:
        return self.__address

    @address.setter
    @final
    def address(self, address: NetworkAddress | None) -> None:
        self.__address = address

    @property
    @final
    def port(self) -> int:
        return self.__port

    @port.setter
    @final
    def port(self, port: int) -> None:
        self.__port = port

    @property
    @final
    def local_address(self) -> NetworkAddress | None:
        return self.__local_address

    @local_address.setter
    @final
    def local_address(self, address: NetworkAddress | None) -> None:
        self.__local_address = address

    @property
    @final
    def local_port(self) -> int:
        return self.__local_port

    @local_port.setter
    @final
    def local_port(self, port: int) -> None:
        self.__local_port = port


class SocketImplFactory(Object):
    __slots__ = ()

    @abstractmethod
    def create_socket_impl(self) -> AbstractSocketImpl:
        raise NotImplementedError


@final
class ImplFactorySlot(Object):
    """Process-wide holder of a SocketImplFactory, which can be installed only once"""

    __slots__ = ("__name", "__factory", "__lock")

    def __init__(self, name: str) -> None:
        super().__init__()
        self.__name: str = name
        self.__factory: SocketImplFactory | None = None
        self.__lock = Lock()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.__name!r} factory={self.__factory!r}>"

    def install(self, factory: SocketImplFactory) -> None:
        if not isinstance(factory, SocketImplFactory):
            raise TypeError(f"Expected a SocketImplFactory, got {factory!r}")
        with self.__lock:
            if self.__factory is not None:
                raise IllegalStateError("Factory already set")
            self.__factory = factory
        logger.debug("%s socket implementation factory installed: %r", self.__name, factory)

    def get(self) -> SocketImplFactory | None:
        with self.__lock:
            return self.__factory

    def create_impl(self, default: Callable[[], AbstractSocketImpl]) -> AbstractSocketImpl:
        factory = self.get()
        if factory is None:
            return default()
        return factory.create_socket_impl()
