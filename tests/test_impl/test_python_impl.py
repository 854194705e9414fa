# -*- coding: Utf-8 -*-

from __future__ import annotations

import errno
import logging
import os
import socket
import struct
from typing import TYPE_CHECKING, Any

from netsock import _transport
from netsock._transport import Outcome, Status
from netsock.address import IPv4Address, IPv6Address
from netsock.constants import AF_INET, EOF, SocketOption
from netsock.exceptions import IllegalStateError, InvalidArgumentError, SocketError, SocketTimeoutError
from netsock.impl.python import PythonServerSocketImpl, PythonSocketImpl

import pytest

if TYPE_CHECKING:
    from unittest.mock import MagicMock

    from pytest import LogCaptureFixture
    from pytest_mock import MockerFixture


@pytest.fixture
def mock_socket(mocker: MockerFixture) -> MagicMock:
    sock: MagicMock = mocker.MagicMock(spec=socket.socket)
    sock.family = socket.AF_INET
    sock.getsockname.return_value = ("127.0.0.1", 40000)
    return sock


@pytest.fixture
def mock_new_socket(mocker: MockerFixture, mock_socket: MagicMock) -> MagicMock:
    return mocker.patch.object(_transport, "new_socket", return_value=mock_socket)


@pytest.fixture
def impl(mock_new_socket: MagicMock) -> PythonSocketImpl:
    impl = PythonSocketImpl()
    impl.create(AF_INET)
    return impl


@pytest.fixture
def mock_set_blocking(mocker: MockerFixture) -> MagicMock:
    return mocker.patch.object(_transport, "set_blocking")


class TestPythonSocketImplLifecycle:
    def test____create____new_handle(self, impl: PythonSocketImpl, mock_new_socket: MagicMock, mock_socket: MagicMock) -> None:
        # Arrange

        # Act & Assert
        mock_new_socket.assert_called_once_with(AF_INET)
        assert impl.is_open()
        assert impl.get_native_socket() is mock_socket

    def test____create____twice(self, impl: PythonSocketImpl) -> None:
        with pytest.raises(IllegalStateError, match=r"^Socket already created$"):
            impl.create(AF_INET)

    def test____create____transport_failure(self, mock_new_socket: MagicMock) -> None:
        # Arrange
        mock_new_socket.side_effect = OSError(errno.EMFILE, os.strerror(errno.EMFILE))
        impl = PythonSocketImpl()

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.create(AF_INET)

        # Assert
        assert exc_info.value.errno == errno.EMFILE
        assert not impl.is_open()

    def test____close____idempotent(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange

        # Act
        impl.close()
        impl.close()

        # Assert
        mock_socket.close.assert_called_once_with()
        assert not impl.is_open()
        assert impl.get_native_socket() is None

    def test____close____error_is_logged(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        caplog: LogCaptureFixture,
    ) -> None:
        # Arrange
        mock_socket.close.side_effect = OSError(errno.EBADF, os.strerror(errno.EBADF))

        # Act
        with caplog.at_level(logging.WARNING, logger="netsock.impl.python"):
            impl.close()

        # Assert
        assert not impl.is_open()
        assert any(record.levelno == logging.WARNING for record in caplog.records)

    @pytest.mark.parametrize(
        "operation",
        [
            pytest.param(lambda impl: impl.read(bytearray(4)), id="read"),
            pytest.param(lambda impl: impl.write(b"data"), id="write"),
            pytest.param(lambda impl: impl.available(), id="available"),
            pytest.param(lambda impl: impl.listen(5), id="listen"),
            pytest.param(lambda impl: impl.shutdown_input(), id="shutdown_input"),
            pytest.param(lambda impl: impl.get_option_bool(SocketOption.KEEP_ALIVE), id="get_option_bool"),
            pytest.param(lambda impl: impl.fileno(), id="fileno"),
        ],
    )
    def test____operation____closed_socket(self, impl: PythonSocketImpl, operation: Any) -> None:
        # Arrange
        impl.close()

        # Act & Assert
        with pytest.raises(IllegalStateError, match=r"^Closed socket$"):
            operation(impl)

    def test____set_native_socket____already_created(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        with pytest.raises(IllegalStateError):
            impl.set_native_socket(mocker.MagicMock(spec=socket.socket))

    def test____bind____ephemeral_port(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange

        # Act
        impl.bind(IPv4Address.LOOPBACK, 0)

        # Assert
        mock_socket.bind.assert_called_once_with(("127.0.0.1", 0))
        assert impl.local_address is IPv4Address.LOOPBACK
        assert impl.local_port == 40000

    def test____bind____address_in_use(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange
        mock_socket.bind.side_effect = OSError(errno.EADDRINUSE, os.strerror(errno.EADDRINUSE))

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.bind(IPv4Address.LOOPBACK, 8000)

        # Assert
        assert exc_info.value.errno == errno.EADDRINUSE
        assert impl.local_address is None

    def test____accept____fill_new_impl(self, impl: PythonSocketImpl, mock_socket: MagicMock, mocker: MockerFixture) -> None:
        # Arrange
        client: MagicMock = mocker.MagicMock(spec=socket.socket)
        client.family = socket.AF_INET
        client.getsockname.return_value = ("192.0.2.10", 40000)
        mock_socket.accept.return_value = (client, ("127.0.0.1", 51000))
        impl.bind(IPv4Address.ANY, 0)
        new_impl = PythonSocketImpl()

        # Act
        impl.accept(new_impl)

        # Assert
        assert new_impl.get_native_socket() is client
        assert new_impl.address == IPv4Address.LOOPBACK
        assert new_impl.port == 51000
        assert new_impl.local_address == IPv4Address(socket.inet_pton(socket.AF_INET, "192.0.2.10"))
        assert new_impl.local_port == 40000
        client.getsockname.assert_called_once_with()
        new_impl.close()
        client.close.assert_called_once_with()

    def test____accept____local_endpoint_failure_closes_client(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        client: MagicMock = mocker.MagicMock(spec=socket.socket)
        client.family = socket.AF_INET
        client.getsockname.side_effect = OSError(errno.ENOTCONN, os.strerror(errno.ENOTCONN))
        mock_socket.accept.return_value = (client, ("127.0.0.1", 51000))

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.accept(PythonSocketImpl())

        # Assert
        assert exc_info.value.errno == errno.ENOTCONN
        client.close.assert_called_with()

    def test____accept____timeout(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange
        mock_socket.accept.side_effect = BlockingIOError(errno.EAGAIN, os.strerror(errno.EAGAIN))

        # Act & Assert
        with pytest.raises(SocketTimeoutError):
            impl.accept(PythonSocketImpl())

    def test____accept____new_impl_failure_closes_client(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        client: MagicMock = mocker.MagicMock(spec=socket.socket)
        client.family = socket.AF_INET
        mock_socket.accept.return_value = (client, ("127.0.0.1", 51000))
        new_impl = PythonSocketImpl()
        new_impl.set_native_socket(mocker.MagicMock(spec=socket.socket))

        # Act
        with pytest.raises(IllegalStateError):
            impl.accept(new_impl)

        # Assert
        client.close.assert_called_once_with()

    @pytest.mark.skipif(os.name in ("nt", "cygwin"), reason="Address reuse is not enabled on this platform")
    def test____server_create____enable_address_reuse(self, mock_new_socket: MagicMock, mock_socket: MagicMock) -> None:
        # Arrange
        impl = PythonServerSocketImpl()

        # Act
        impl.create(AF_INET)

        # Assert
        mock_socket.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


class TestPythonSocketImplConnect:
    def test____connect____blocking(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange

        # Act
        impl.connect(IPv4Address.LOOPBACK, 8080)

        # Assert
        mock_socket.connect.assert_called_once_with(("127.0.0.1", 8080))
        assert impl.address is IPv4Address.LOOPBACK
        assert impl.port == 8080
        assert impl.local_port == 40000
        assert impl.local_address == IPv4Address.LOOPBACK

    def test____connect____blocking_refused(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange
        mock_socket.connect.side_effect = ConnectionRefusedError(errno.ECONNREFUSED, os.strerror(errno.ECONNREFUSED))

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.connect(IPv4Address.LOOPBACK, 8080)

        # Assert
        assert exc_info.value.errno == errno.ECONNREFUSED
        assert impl.address is None

    def test____connect____negative_timeout(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        with pytest.raises(InvalidArgumentError):
            impl.connect(IPv4Address.LOOPBACK, 8080, -1)
        mock_socket.connect.assert_not_called()

    def test____connect____any_local_address_targets_local_host(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mock_get_local_host: MagicMock = mocker.patch("netsock.impl.python.get_local_host", return_value=IPv4Address.LOOPBACK)

        # Act
        impl.connect(IPv4Address.ANY, 80)

        # Assert
        mock_get_local_host.assert_called_once_with(prefer_ipv6=False)
        mock_socket.connect.assert_called_once_with(("127.0.0.1", 80))
        assert impl.address is IPv4Address.LOOPBACK

    def test____connect____immediate_success(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mock_try_connect: MagicMock = mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.OK))
        mock_wait_writable: MagicMock = mocker.patch.object(_transport, "wait_writable")

        # Act
        impl.connect(IPv4Address.LOOPBACK, 8080, 1000)

        # Assert
        mock_try_connect.assert_called_once_with(mock_socket, ("127.0.0.1", 8080))
        mock_wait_writable.assert_not_called()
        assert mock_set_blocking.call_args_list == [mocker.call(mock_socket, False), mocker.call(mock_socket, True)]
        assert impl.port == 8080

    def test____connect____in_progress_then_established(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.WOULD_BLOCK, errno.EINPROGRESS))
        mocker.patch.object(_transport, "monotonic_ms", side_effect=[1000, 1000])
        mock_wait_writable: MagicMock = mocker.patch.object(_transport, "wait_writable", return_value=Outcome(Status.OK))
        mock_pending_error: MagicMock = mocker.patch.object(_transport, "pending_error", return_value=0)

        # Act
        impl.connect(IPv4Address.LOOPBACK, 8080, 500)

        # Assert
        mock_wait_writable.assert_called_once_with(mock_socket, 500)
        mock_pending_error.assert_called_once_with(mock_socket)
        mock_set_blocking.assert_called_with(mock_socket, True)
        assert impl.address is IPv4Address.LOOPBACK

    def test____connect____readiness_timed_out(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.WOULD_BLOCK, errno.EINPROGRESS))
        mocker.patch.object(_transport, "monotonic_ms", side_effect=[1000, 1000])
        mocker.patch.object(_transport, "wait_writable", return_value=Outcome(Status.TIMED_OUT, errno.ETIMEDOUT))
        mock_pending_error: MagicMock = mocker.patch.object(_transport, "pending_error")

        # Act
        with pytest.raises(SocketTimeoutError):
            impl.connect(IPv4Address.LOOPBACK, 8080, 1)

        # Assert
        mock_pending_error.assert_not_called()
        mock_set_blocking.assert_called_with(mock_socket, True)
        assert impl.address is None

    def test____connect____deadline_elapsed_after_interruption(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.WOULD_BLOCK, errno.EINPROGRESS))
        mocker.patch.object(_transport, "monotonic_ms", side_effect=[1000, 1001, 1010])
        mock_wait_writable: MagicMock = mocker.patch.object(
            _transport,
            "wait_writable",
            return_value=Outcome(Status.INTERRUPTED, errno.EINTR),
        )

        # Act
        with pytest.raises(SocketTimeoutError):
            impl.connect(IPv4Address.LOOPBACK, 8080, 5)

        # Assert
        mock_wait_writable.assert_called_once_with(mock_socket, 4)

    def test____connect____refused_is_not_a_timeout(
        self,
        impl: PythonSocketImpl,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.WOULD_BLOCK, errno.EINPROGRESS))
        mocker.patch.object(_transport, "monotonic_ms", side_effect=[1000, 1000])
        mocker.patch.object(_transport, "wait_writable", return_value=Outcome(Status.OK))
        mocker.patch.object(_transport, "pending_error", return_value=errno.ECONNREFUSED)

        # Act
        with pytest.raises(SocketError, match=r"^\[Errno \d+\] Cannot connect") as exc_info:
            impl.connect(IPv4Address.LOOPBACK, 8080, 500)

        # Assert
        assert not isinstance(exc_info.value, SocketTimeoutError)
        assert exc_info.value.errno == errno.ECONNREFUSED

    def test____connect____pending_timeout_error(
        self,
        impl: PythonSocketImpl,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.WOULD_BLOCK, errno.EINPROGRESS))
        mocker.patch.object(_transport, "monotonic_ms", side_effect=[1000, 1000])
        mocker.patch.object(_transport, "wait_writable", return_value=Outcome(Status.OK))
        mocker.patch.object(_transport, "pending_error", return_value=errno.ETIMEDOUT)

        # Act & Assert
        with pytest.raises(SocketTimeoutError):
            impl.connect(IPv4Address.LOOPBACK, 8080, 500)

    def test____connect____immediate_failure(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        mock_set_blocking: MagicMock,
        mocker: MockerFixture,
    ) -> None:
        # Arrange
        mocker.patch.object(_transport, "try_connect", return_value=Outcome(Status.FATAL, errno.ENETUNREACH))
        mock_wait_writable: MagicMock = mocker.patch.object(_transport, "wait_writable")

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.connect(IPv4Address.LOOPBACK, 8080, 500)

        # Assert
        assert exc_info.value.errno == errno.ENETUNREACH
        mock_wait_writable.assert_not_called()
        mock_set_blocking.assert_called_with(mock_socket, True)


class TestPythonSocketImplTransfer:
    def test____read____received_bytes(self, impl: PythonSocketImpl, mock_socket: MagicMock, mocker: MockerFixture) -> None:
        # Arrange
        def recv_into(sock: Any, buffer: bytearray, nbytes: int) -> Outcome:
            buffer[:3] = b"abc"
            return Outcome(Status.OK, 3)

        mock_recv_into: MagicMock = mocker.patch.object(_transport, "recv_into", side_effect=recv_into)
        buffer = bytearray(8)

        # Act
        nbytes = impl.read(buffer)

        # Assert
        assert nbytes == 3
        assert buffer[:3] == b"abc"
        mock_recv_into.assert_called_once_with(mock_socket, buffer, 8)

    def test____read____empty_buffer(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        mock_recv_into: MagicMock = mocker.patch.object(_transport, "recv_into")

        assert impl.read(bytearray()) == 0
        mock_recv_into.assert_not_called()

    def test____read____end_of_stream_is_sticky(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        # Arrange
        mock_recv_into: MagicMock = mocker.patch.object(_transport, "recv_into", return_value=Outcome(Status.OK, 0))
        mock_pending_bytes: MagicMock = mocker.patch.object(_transport, "pending_bytes")

        # Act
        first = impl.read(bytearray(8))
        second = impl.read(bytearray(8))

        # Assert
        assert first == second == EOF
        assert mock_recv_into.call_count == 1
        assert impl.available() == 0
        mock_pending_bytes.assert_not_called()

    @pytest.mark.parametrize(
        "outcome",
        [
            pytest.param(Outcome(Status.WOULD_BLOCK, errno.EAGAIN), id="would-block"),
            pytest.param(Outcome(Status.INTERRUPTED, errno.EINTR), id="interrupted"),
        ],
    )
    def test____read____nothing_received(self, impl: PythonSocketImpl, outcome: Outcome, mocker: MockerFixture) -> None:
        mocker.patch.object(_transport, "recv_into", return_value=outcome)

        assert impl.read(bytearray(8)) == 0

    def test____read____transport_error(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        # Arrange
        mocker.patch.object(_transport, "recv_into", return_value=Outcome(Status.FATAL, errno.ECONNRESET))

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.read(bytearray(8))

        # Assert
        assert exc_info.value.errno == errno.ECONNRESET

    def test____read____after_shutdown_input(self, impl: PythonSocketImpl, mock_socket: MagicMock, mocker: MockerFixture) -> None:
        # Arrange
        mock_recv_into: MagicMock = mocker.patch.object(_transport, "recv_into")

        # Act
        impl.shutdown_input()

        # Assert
        mock_socket.shutdown.assert_called_once_with(socket.SHUT_RD)
        assert impl.read(bytearray(8)) == EOF
        mock_recv_into.assert_not_called()

    def test____write____partial_sends(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        # Arrange
        outcomes = [Outcome(Status.OK, 2), Outcome(Status.INTERRUPTED, errno.EINTR), Outcome(Status.OK, 3)]
        sent_chunks: list[bytes] = []

        def send(sock: Any, data: memoryview, flags: int = 0) -> Outcome:
            sent_chunks.append(bytes(data))
            return outcomes.pop(0)

        mocker.patch.object(_transport, "send", side_effect=send)

        # Act
        impl.write(b"hello")

        # Assert
        assert sent_chunks == [b"hello", b"llo", b"llo"]
        assert not outcomes

    def test____write____send_timeout(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        mocker.patch.object(_transport, "send", return_value=Outcome(Status.WOULD_BLOCK, errno.EAGAIN))

        with pytest.raises(SocketTimeoutError):
            impl.write(b"hello")

    def test____write____broken_pipe(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        # Arrange
        mocker.patch.object(_transport, "send", return_value=Outcome(Status.FATAL, errno.EPIPE))

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.write(b"hello")

        # Assert
        assert exc_info.value.errno == errno.EPIPE

    def test____available____pending_bytes(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        mocker.patch.object(_transport, "pending_bytes", return_value=12)

        assert impl.available() == 12

    def test____available____unsupported(self, impl: PythonSocketImpl, mocker: MockerFixture) -> None:
        mocker.patch.object(_transport, "pending_bytes", side_effect=OSError(errno.EOPNOTSUPP, "unsupported"))

        assert impl.available() == 0

    def test____send_urgent_data____out_of_band(self, impl: PythonSocketImpl, mock_socket: MagicMock, mocker: MockerFixture) -> None:
        # Arrange
        sent: list[tuple[bytes, int]] = []

        def send(sock: Any, data: memoryview, flags: int = 0) -> Outcome:
            sent.append((bytes(data), flags))
            return Outcome(Status.OK, 1)

        mocker.patch.object(_transport, "send", side_effect=send)

        # Act
        impl.send_urgent_data(0x1FF)

        # Assert
        assert impl.supports_urgent_data()
        assert sent == [(b"\xff", socket.MSG_OOB)]


class TestPythonSocketImplOptions:
    @pytest.mark.parametrize(
        ["option", "level", "name"],
        [
            pytest.param(SocketOption.KEEP_ALIVE, socket.SOL_SOCKET, socket.SO_KEEPALIVE, id="KEEP_ALIVE"),
            pytest.param(SocketOption.REUSE_ADDRESS, socket.SOL_SOCKET, socket.SO_REUSEADDR, id="REUSE_ADDRESS"),
            pytest.param(SocketOption.OOB_INLINE, socket.SOL_SOCKET, socket.SO_OOBINLINE, id="OOB_INLINE"),
            pytest.param(SocketOption.TCP_NO_DELAY, socket.IPPROTO_TCP, socket.TCP_NODELAY, id="TCP_NO_DELAY"),
        ],
    )
    def test____boolean_option____native_option(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        option: SocketOption,
        level: int,
        name: int,
    ) -> None:
        # Arrange
        mock_socket.getsockopt.return_value = 1

        # Act
        impl.set_option_bool(option, True)
        value = impl.get_option_bool(option)

        # Assert
        mock_socket.setsockopt.assert_called_once_with(level, name, 1)
        mock_socket.getsockopt.assert_called_once_with(level, name)
        assert value is True

    def test____buffer_size_option____native_option(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange
        mock_socket.getsockopt.return_value = 8192

        # Act
        impl.set_option_int(SocketOption.RECEIVE_BUFFER_SIZE, 4096)
        value = impl.get_option_int(SocketOption.SEND_BUFFER_SIZE)

        # Assert
        mock_socket.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_RCVBUF, 4096)
        mock_socket.getsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_SNDBUF)
        assert value == 8192

    @pytest.mark.skipif(os.name == "nt", reason="Timeouts are encoded as a struct timeval")
    def test____timeout_option____timeval(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange
        mock_socket.getsockopt.return_value = struct.pack("@ll", 2, 250_000)

        # Act
        impl.set_option_int(SocketOption.RECEIVE_TIMEOUT, 1500)
        value = impl.get_option_int(SocketOption.SEND_TIMEOUT)

        # Assert
        mock_socket.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_RCVTIMEO, struct.pack("@ll", 1, 500_000))
        assert value == 2250

    def test____timeout_option____negative(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        with pytest.raises(InvalidArgumentError):
            impl.set_option_int(SocketOption.SEND_TIMEOUT, -1)
        mock_socket.setsockopt.assert_not_called()

    @pytest.mark.parametrize(["raw", "expected"], [((1, 5), 5), ((1, 0), 0), ((0, 0), -1)])
    def test____linger_option____get(
        self,
        impl: PythonSocketImpl,
        mock_socket: MagicMock,
        raw: tuple[int, int],
        expected: int,
    ) -> None:
        # Arrange
        mock_socket.getsockopt.return_value = struct.pack("@ii", *raw)

        # Act & Assert
        assert impl.get_option_int(SocketOption.LINGER) == expected
        assert impl.get_option_bool(SocketOption.LINGER) is (expected >= 0)

    def test____linger_option____set(self, impl: PythonSocketImpl, mock_socket: MagicMock, mocker: MockerFixture) -> None:
        # Arrange

        # Act
        impl.set_option_int(SocketOption.LINGER, 10)
        impl.set_option_bool(SocketOption.LINGER, False)

        # Assert
        assert mock_socket.setsockopt.call_args_list == [
            mocker.call(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("@ii", 1, 10)),
            mocker.call(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("@ii", 0, 0)),
        ]

    def test____linger_option____enable_without_timeout(self, impl: PythonSocketImpl) -> None:
        with pytest.raises(InvalidArgumentError):
            impl.set_option_bool(SocketOption.LINGER, True)

    def test____traffic_class_option____ipv4(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        impl.set_option_int(SocketOption.TRAFFIC_CLASS, 0x10)

        mock_socket.setsockopt.assert_called_once_with(socket.IPPROTO_IP, socket.IP_TOS, 0x10)

    @pytest.mark.parametrize(
        "operation",
        [
            pytest.param(lambda impl: impl.get_option_bool(SocketOption.RECEIVE_BUFFER_SIZE), id="get-bool"),
            pytest.param(lambda impl: impl.set_option_bool(SocketOption.SEND_TIMEOUT, True), id="set-bool"),
            pytest.param(lambda impl: impl.get_option_int(SocketOption.KEEP_ALIVE), id="get-int"),
            pytest.param(lambda impl: impl.set_option_int(SocketOption.TCP_NO_DELAY, 1), id="set-int"),
        ],
    )
    def test____option____wrong_kind(self, impl: PythonSocketImpl, operation: Any) -> None:
        with pytest.raises(InvalidArgumentError):
            operation(impl)

    def test____option____transport_error(self, impl: PythonSocketImpl, mock_socket: MagicMock) -> None:
        # Arrange
        mock_socket.setsockopt.side_effect = OSError(errno.ENOPROTOOPT, os.strerror(errno.ENOPROTOOPT))

        # Act
        with pytest.raises(SocketError) as exc_info:
            impl.set_option_bool(SocketOption.KEEP_ALIVE, True)

        # Assert
        assert exc_info.value.errno == errno.ENOPROTOOPT


@pytest.mark.functional
class TestPythonSocketImplLoopback:
    def test____connect____refused_on_closed_port(self) -> None:
        # Arrange
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as unused_socket:
            unused_socket.bind(("127.0.0.1", 0))
            port: int = unused_socket.getsockname()[1]
        impl = PythonSocketImpl()
        impl.create(AF_INET)

        # Act & Assert
        with impl, pytest.raises(SocketError) as exc_info:
            impl.connect(IPv4Address.LOOPBACK, port, 2000)
        assert not isinstance(exc_info.value, SocketTimeoutError)

    @pytest.mark.skipif(not socket.has_ipv6, reason="IPv6 is not supported")
    def test____bind____ipv6_loopback(self) -> None:
        # Arrange
        impl = PythonSocketImpl()
        try:
            impl.create(socket.AF_INET6)
            impl.bind(IPv6Address.LOOPBACK, 0)
        except SocketError as exc:
            impl.close()
            pytest.skip(f"IPv6 loopback unavailable: {exc}")

        # Act & Assert
        with impl:
            assert impl.local_address is IPv6Address.LOOPBACK
            assert impl.local_port > 0
