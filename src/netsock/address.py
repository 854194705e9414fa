# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Network IP address module"""

from __future__ import annotations

__all__ = [
    "IPv4Address",
    "IPv6Address",
    "NetworkAddress",
    "address_from_sockaddr",
    "get_all_by_name",
    "get_by_address",
    "get_by_name",
    "get_local_host",
    "is_ipv4_mapped_address",
    "is_numeric",
    "loopback_addresses",
    "lookup_host_by_name",
    "parse_numeric_address",
    "select_preferred",
]

import logging
import socket as _socket
from abc import abstractmethod
from typing import Any, ClassVar, Final, Iterable, Sequence

from . import _transport
from .constants import AF_INET, AF_INET6, NI_NAMEREQD, NI_NUMERICHOST, AddressFamily, NameInfoFlag
from .exceptions import InvalidArgumentError, UnknownHostError
from .system.object import Object, final
from .system.utils.abc import concreteclass

logger = logging.getLogger(__name__)

_IPV4_MAPPED_PREFIX: Final[bytes] = b"\x00" * 10 + b"\xff\xff"


class NetworkAddress(Object):
    """Internet Protocol address

    The raw address and the family never change after construction.
    The host name and its numeric textual form are computed on first access then kept.
    """

    __slots__ = ("__address", "__hostname", "__host_address")

    ADDRESS_SIZE: ClassVar[int]

    def __init__(self, address: bytes, hostname: str = "") -> None:
        super().__init__()
        address = bytes(address)
        if len(address) != self.ADDRESS_SIZE:
            raise InvalidArgumentError(
                f"Invalid address length for {type(self).__name__}: expected {self.ADDRESS_SIZE}, got {len(address)}"
            )
        self.__address: bytes = address
        self.__hostname: str = str(hostname)
        self.__host_address: str = ""

    @classmethod
    def _well_known(cls, address: bytes, hostname: str, host_address: str, **kwargs: Any) -> Any:
        self = cls(address, hostname, **kwargs)
        self.__host_address = host_address
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"

    def __str__(self) -> str:
        return f"{self.__hostname}/{self.host_address}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkAddress):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __copy__(self) -> NetworkAddress:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> NetworkAddress:
        return self

    def _key(self) -> tuple[Any, ...]:
        return (self.family, self.__address)

    @property
    @abstractmethod
    def family(self) -> AddressFamily:
        raise NotImplementedError

    @property
    @final
    def address(self) -> bytes:
        return self.__address

    @property
    @final
    def host_name(self) -> str:
        """Host name of this address, resolved through a reverse lookup if not given at construction.

        Falls back to the numeric form when no name is registered for the address.
        """
        if not self.__hostname:
            try:
                self.__hostname = self.get_name_info(NI_NAMEREQD)
            except UnknownHostError:
                self.__hostname = self.host_address
        return self.__hostname

    @property
    @final
    def host_address(self) -> str:
        if not self.__host_address:
            self.__host_address = self.get_name_info(NI_NUMERICHOST)
        return self.__host_address

    @final
    def get_name_info(self, flags: NameInfoFlag | int) -> str:
        try:
            return _transport.getnameinfo(self.to_sockaddr(0), int(flags))
        except OSError as exc:
            raise UnknownHostError(f"Cannot get name info for {self.numeric()!r}") from exc

    @final
    def numeric(self) -> str:
        return _transport.inet_ntop(self.family, self.__address)

    @abstractmethod
    def to_sockaddr(self, port: int) -> tuple[Any, ...]:
        raise NotImplementedError

    @abstractmethod
    def is_multicast_address(self) -> bool:
        raise NotImplementedError

    @final
    def is_any_local_address(self) -> bool:
        return not any(self.__address)

    @abstractmethod
    def is_loopback_address(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_link_local_address(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_site_local_address(self) -> bool:
        raise NotImplementedError


@final
@concreteclass
class IPv4Address(NetworkAddress):
    __slots__ = ()

    ADDRESS_SIZE: ClassVar[int] = 4

    ANY: ClassVar[IPv4Address]
    BROADCAST: ClassVar[IPv4Address]
    LOOPBACK: ClassVar[IPv4Address]

    @property
    def family(self) -> AddressFamily:
        return AF_INET

    def to_sockaddr(self, port: int) -> tuple[str, int]:
        return (self.numeric(), port)

    def is_multicast_address(self) -> bool:
        return (self.address[0] & 0xF0) == 0xE0

    def is_loopback_address(self) -> bool:
        return self.address[0] == 127

    def is_link_local_address(self) -> bool:
        return self.address[0] == 169 and self.address[1] == 254

    def is_site_local_address(self) -> bool:
        match tuple(self.address[:2]):
            case (10, _):
                return True
            case (172, second) if (second & 0xF0) == 16:
                return True
            case (192, 168):
                return True
            case _:
                return False


@final
@concreteclass
class IPv6Address(NetworkAddress):
    __slots__ = ("__scope_id",)

    ADDRESS_SIZE: ClassVar[int] = 16

    ANY: ClassVar[IPv6Address]
    LOOPBACK: ClassVar[IPv6Address]

    def __init__(self, address: bytes, hostname: str = "", scope_id: int = 0) -> None:
        super().__init__(address, hostname)
        if scope_id < 0:
            raise InvalidArgumentError("Negative scope id")
        self.__scope_id: int = scope_id

    def _key(self) -> tuple[Any, ...]:
        return (*super()._key(), self.__scope_id)

    @property
    def family(self) -> AddressFamily:
        return AF_INET6

    @property
    def scope_id(self) -> int:
        return self.__scope_id

    def to_sockaddr(self, port: int) -> tuple[str, int, int, int]:
        return (self.numeric(), port, 0, self.__scope_id)

    def is_multicast_address(self) -> bool:
        return self.address[0] == 0xFF

    def is_loopback_address(self) -> bool:
        return not any(self.address[:15]) and self.address[15] == 0x01

    def is_link_local_address(self) -> bool:
        return self.address[0] == 0xFE and (self.address[1] & 0xC0) == 0x80

    def is_site_local_address(self) -> bool:
        return self.address[0] == 0xFE and (self.address[1] & 0xC0) == 0xC0


IPv4Address.ANY = IPv4Address._well_known(b"\x00\x00\x00\x00", "0.0.0.0", "0.0.0.0")
IPv4Address.BROADCAST = IPv4Address._well_known(b"\xff\xff\xff\xff", "255.255.255.255", "255.255.255.255")
IPv4Address.LOOPBACK = IPv4Address._well_known(b"\x7f\x00\x00\x01", "localhost", "127.0.0.1")
IPv6Address.ANY = IPv6Address._well_known(b"\x00" * 16, "::", "::")
IPv6Address.LOOPBACK = IPv6Address._well_known(b"\x00" * 15 + b"\x01", "localhost", "::1")


def is_ipv4_mapped_address(address: bytes) -> bool:
    return len(address) == 16 and address[:12] == _IPV4_MAPPED_PREFIX


def loopback_addresses() -> list[NetworkAddress]:
    return [IPv6Address.LOOPBACK, IPv4Address.LOOPBACK]


def get_by_address(address: bytes, hostname: str = "") -> NetworkAddress:
    address = bytes(address)
    match len(address):
        case 4:
            return IPv4Address(address, hostname)
        case 16 if is_ipv4_mapped_address(address):
            return IPv4Address(address[12:], hostname)
        case 16:
            return IPv6Address(address, hostname)
        case length:
            raise InvalidArgumentError(f"Invalid IP address length: {length}")


def address_from_sockaddr(family: int, sockaddr: tuple[Any, ...], hostname: str = "") -> NetworkAddress:
    match AddressFamily(family):
        case AddressFamily.AF_INET:
            return IPv4Address(_transport.inet_pton(AF_INET, sockaddr[0]), hostname)
        case AddressFamily.AF_INET6:
            host: str = sockaddr[0].partition("%")[0]
            raw: bytes = _transport.inet_pton(AF_INET6, host)
            if is_ipv4_mapped_address(raw):
                return IPv4Address(raw[12:], hostname)
            scope_id: int = sockaddr[3] if len(sockaddr) > 3 else 0
            return IPv6Address(raw, hostname, scope_id)
        case _:
            raise InvalidArgumentError(f"Unsupported address family: {family}")


def is_numeric(address: str) -> bool:
    if not address:
        return False
    try:
        _transport.getaddrinfo(address, _socket.AI_NUMERICHOST)
    except OSError:
        return False
    return True


def parse_numeric_address(address: str) -> NetworkAddress:
    """Build the address from its numeric form

    An empty string is the IPv6 loopback address.
    Legacy IPv4 notations accepted by the resolver ('127.1', '0x7f.1', '010.0.0.1', ...) raise UnknownHostError.
    """
    if not address:
        return IPv6Address.LOOPBACK
    try:
        family, sockaddr = _transport.getaddrinfo(address, _socket.AI_NUMERICHOST)[0]
    except (OSError, IndexError) as exc:
        raise UnknownHostError(f"Not a numeric address: {address!r}") from exc
    if family == AF_INET and ":" not in address:
        try:
            _transport.inet_pton(AF_INET, address)
        except OSError:
            raise UnknownHostError(f"Deprecated IPv4 address format: {address!r}") from None
    return address_from_sockaddr(family, sockaddr)


def lookup_host_by_name(hostname: str) -> list[NetworkAddress]:
    try:
        results = _transport.getaddrinfo(hostname, _socket.AI_ADDRCONFIG)
    except OSError as exc:
        raise UnknownHostError(f"Unknown host: {hostname!r}") from exc
    addresses: list[NetworkAddress] = []
    for family, sockaddr in results:
        address = address_from_sockaddr(family, sockaddr, hostname)
        if address not in addresses:
            addresses.append(address)
    if not addresses:
        raise UnknownHostError(f"Unknown host: {hostname!r}")
    return addresses


def get_all_by_name(hostname: str = "") -> list[NetworkAddress]:
    if not hostname:
        return loopback_addresses()
    if is_numeric(hostname):
        return [parse_numeric_address(hostname)]
    return lookup_host_by_name(hostname)


def select_preferred(addresses: Iterable[NetworkAddress], family: int) -> NetworkAddress:
    candidates: Sequence[NetworkAddress] = tuple(addresses)
    for address in candidates:
        if address.family == family:
            return address
    if candidates:
        return candidates[0]
    raise UnknownHostError("No address available")


def get_by_name(hostname: str, *, prefer_ipv6: bool = False) -> NetworkAddress:
    return select_preferred(get_all_by_name(hostname), AF_INET6 if prefer_ipv6 else AF_INET)


def get_local_host(*, prefer_ipv6: bool = False) -> NetworkAddress:
    try:
        return get_by_name(_transport.local_host_name(), prefer_ipv6=prefer_ipv6)
    except OSError as exc:
        logger.debug("Cannot resolve local host name, using loopback address", exc_info=exc)
    return IPv6Address.LOOPBACK if prefer_ipv6 else IPv4Address.LOOPBACK
