# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network socket endpoint module"""

from __future__ import annotations

__all__ = ["SocketEndpoint"]

import logging
from typing import Any

from .address import IPv4Address, NetworkAddress, get_by_name
from .constants import AF_INET6
from .exceptions import InvalidArgumentError, UnknownHostError
from .system.object import Object, final

logger = logging.getLogger(__name__)


@final
class SocketEndpoint(Object):
    """IP address and port pair

    An endpoint built from a host name that could not be resolved keeps the name as a label:
    it can be displayed, but not used to bind or connect.
    """

    __slots__ = ("__address", "__port", "__hostname")

    def __init__(self, address: NetworkAddress | None = None, port: int = 0) -> None:
        super().__init__()
        self.__address: NetworkAddress | None = address if address is not None else IPv4Address.ANY
        self.__port: int = self.__check_port(port)
        self.__hostname: str = ""

    @classmethod
    def from_hostname(cls, hostname: str, port: int, *, prefer_ipv6: bool = False) -> SocketEndpoint:
        self = cls.unresolved(hostname, port)
        try:
            address = get_by_name(hostname, prefer_ipv6=prefer_ipv6)
        except UnknownHostError as exc:
            logger.debug("Cannot resolve %r, keeping it unresolved", hostname, exc_info=exc)
        else:
            self.__address = address
            self.__hostname = ""
        return self

    @classmethod
    def unresolved(cls, hostname: str, port: int) -> SocketEndpoint:
        self = cls(None, port)
        self.__address = None
        self.__hostname = str(hostname)
        return self

    def __repr__(self) -> str:
        if self.__address is None:
            return f"<{type(self).__name__} {self} unresolved>"
        return f"<{type(self).__name__} {self}>"

    def __str__(self) -> str:
        if self.__address is None:
            return f"{self.__hostname}:{self.__port}"
        if self.__address.family == AF_INET6:
            return f"[{self.__address.numeric()}]:{self.__port}"
        return f"{self.__address.numeric()}:{self.__port}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SocketEndpoint):
            return NotImplemented
        return (self.__address, self.__hostname, self.__port) == (other.__address, other.__hostname, other.__port)

    def __hash__(self) -> int:
        return hash((self.__address, self.__hostname, self.__port))

    def for_connection(self) -> tuple[Any, ...]:
        if self.__address is None:
            raise UnknownHostError(f"Unresolved endpoint: {self}")
        return self.__address.to_sockaddr(self.__port)

    @staticmethod
    def __check_port(port: int) -> int:
        port = int(port)
        if not (0 <= port <= 0xFFFF):
            raise InvalidArgumentError(f"Port out of range: {port}")
        return port

    @property
    def address(self) -> NetworkAddress | None:
        return self.__address

    @property
    def port(self) -> int:
        return self.__port

    @property
    def host_name(self) -> str:
        if self.__address is None:
            return self.__hostname
        return self.__address.host_name

    @property
    def is_unresolved(self) -> bool:
        return self.__address is None
