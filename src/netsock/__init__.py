# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Dual-stack blocking socket library

NetSock resolves IPv4/IPv6 addresses, connects with optional timeouts and
exposes client and server sockets with a strict lifecycle and a buffered byte stream.
The transport layer is pluggable through socket implementation factories.

This program is free software: you can redistribute it and/or modify it under
the terms of the GNU General Public License as published by the Free Software
Foundation, either version 3 of the License, or (at your option) any later
version.
This program is distributed in the hope that it will be useful, but WITHOUT
ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
FOR A PARTICULAR PURPOSE. See the GNU General Public License for more details.
You should have received a copy of the GNU General Public License along with
this program. If not, see <http://www.gnu.org/licenses/>.
"""

from __future__ import annotations

__all__ = [
    "AF_INET",
    "AF_INET6",
    "AbstractSocketImpl",
    "AddressFamily",
    "ClientSocket",
    "DEFAULT_BACKLOG",
    "DEFAULT_STREAM_BUFFER_SIZE",
    "EOF",
    "IPv4Address",
    "IPv6Address",
    "IllegalStateError",
    "ImplFactorySlot",
    "InvalidArgumentError",
    "NI_NAMEREQD",
    "NI_NUMERICHOST",
    "NameInfoFlag",
    "NetworkAddress",
    "PythonServerSocketImpl",
    "PythonSocketImpl",
    "SHUT_RD",
    "SHUT_RDWR",
    "SHUT_WR",
    "STREAM_PUTBACK_SIZE",
    "ServerSocket",
    "ShutdownFlag",
    "SocketEndpoint",
    "SocketError",
    "SocketImplFactory",
    "SocketOption",
    "SocketStreamBuffer",
    "SocketTimeoutError",
    "UnknownHostError",
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

__author__ = "FrankySnow9"
__contact__ = "clairicia.rcj.francis@gmail.com"
__copyright__ = "Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine"
__credits__ = ["FrankySnow9"]
__deprecated__ = False
__email__ = "clairicia.rcj.francis@gmail.com"
__license__ = "GNU GPL v3.0"
__maintainer__ = "FrankySnow9"
__status__ = "Development"
__version__ = "1.0.0.dev1"

import sys

############ Environment initialization ############
if sys.version_info < (3, 10):
    raise ImportError(
        "This library must be run with python >= 3.10 (actual={}.{}.{})".format(*sys.version_info[0:3]),
        name=__name__,
        path=__file__,
    )

############ Package initialization ############
from .address import *
from .client import *
from .constants import *
from .endpoint import *
from .exceptions import *
from .impl import *
from .server import *
from .tools import *

del sys
