# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""NetSock's network tools module"""

from __future__ import annotations

__all__ = ["SocketStreamBuffer"]


############ Package initialization ############
from .stream import *
