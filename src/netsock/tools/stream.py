# -*- coding: Utf-8 -*-
# Copyright (c) 2021-2022, Francis Clairicia-Rose-Claire-Josephine
#
#
"""Buffered byte stream over a socket implementation module"""

from __future__ import annotations

__all__ = ["SocketStreamBuffer"]

from typing import TYPE_CHECKING, Any

from ..constants import DEFAULT_STREAM_BUFFER_SIZE, EOF, STREAM_PUTBACK_SIZE
from ..exceptions import IllegalStateError, InvalidArgumentError
from ..system.object import Object, final

if TYPE_CHECKING:
    from ..impl.base import AbstractSocketImpl


@final
class SocketStreamBuffer(Object):
    """Byte stream with an output buffer and an input buffer keeping a small putback region

    Each time the input buffer is exhausted, at most one read is issued to the implementation.
    A read returning nothing (peer closed, or receive timeout) is reported as end-of-stream.
    Errors raised by the implementation are propagated.
    """

    __slots__ = ("__impl", "__buffer_size", "__putback_size", "__output", "__input", "__pos", "__end")

    def __init__(
        self,
        impl: AbstractSocketImpl,
        *,
        buffer_size: int = DEFAULT_STREAM_BUFFER_SIZE,
        putback_size: int = STREAM_PUTBACK_SIZE,
    ) -> None:
        super().__init__()
        if putback_size < 0:
            raise InvalidArgumentError("Negative putback size")
        if buffer_size <= putback_size:
            raise InvalidArgumentError(f"Buffer size must be greater than {putback_size}")
        self.__impl: AbstractSocketImpl = impl
        self.__buffer_size: int = buffer_size
        self.__putback_size: int = putback_size
        self.__output: bytearray = bytearray()
        self.__input: bytearray = bytearray(buffer_size)
        self.__pos: int = 0
        self.__end: int = 0

    def __repr__(self) -> str:
        return f"<{type(self).__name__} impl={self.__impl!r} in={self.__end - self.__pos} out={len(self.__output)}>"

    def __enter__(self) -> SocketStreamBuffer:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def buffer_size(self) -> int:
        return self.__buffer_size

    def write(self, data: bytes | bytearray | memoryview) -> int:
        output = self.__output
        capacity = self.__buffer_size
        with memoryview(data) as view:
            nbytes = view.nbytes
            with view.cast("B") as chunk:
                written = 0
                while written < nbytes:
                    space = capacity - len(output)
                    output += chunk[written : written + space]
                    written += min(space, nbytes - written)
                    if len(output) >= capacity:
                        self.flush()
        return nbytes

    def flush(self) -> None:
        output = self.__output
        if not output:
            return
        self.__impl.write(bytes(output))
        output.clear()

    def close(self) -> None:
        self.flush()

    def available(self) -> int:
        if self.__pos < self.__end:
            return self.__end - self.__pos
        return self.__impl.available()

    def read_byte(self) -> int:
        if self.__pos >= self.__end and not self.__underflow():
            return EOF
        byte = self.__input[self.__pos]
        self.__pos += 1
        return byte

    def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        data = bytearray()
        while size < 0 or len(data) < size:
            if self.__pos >= self.__end and not self.__underflow():
                break
            data += self.__take(size - len(data) if size > 0 else -1)
        return bytes(data)

    def read1(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        if self.__pos >= self.__end and not self.__underflow():
            return b""
        return self.__take(size)

    def unread(self, count: int = 1) -> None:
        if count < 0:
            raise InvalidArgumentError("Negative count")
        if count > self.__pos:
            raise IllegalStateError(f"Cannot unread {count} byte(s): only {self.__pos} available")
        self.__pos -= count

    def __take(self, size: int) -> bytes:
        pos = self.__pos
        end = self.__end if size < 0 else min(self.__end, pos + size)
        self.__pos = end
        return bytes(self.__input[pos:end])

    def __underflow(self) -> bool:
        buffer = self.__input
        keep = min(self.__putback_size, self.__pos)
        buffer[0:keep] = buffer[self.__pos - keep : self.__pos]
        self.__pos = self.__end = keep
        with memoryview(buffer) as view:
            received = self.__impl.read(view[keep:])
        if received < 1:
            return False
        self.__end = keep + received
        return True
