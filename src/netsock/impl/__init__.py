# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""NetSock's socket implementation module"""

from __future__ import annotations

__all__ = [
    "AbstractSocketImpl",
    "ImplFactorySlot",
    "PythonServerSocketImpl",
    "PythonSocketImpl",
    "SocketImplFactory",
]


############ Package initialization ############
from .base import *
from .python import *
