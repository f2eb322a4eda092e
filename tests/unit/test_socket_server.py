"""
Unit tests for the accept loop, with a scripted listening socket.
"""

import socket

from staticserver.config import ServerConfig
from staticserver.core.connection import Connection
from staticserver.core.socket_server import SocketServer


class ScriptedListener:
    """
    Stand-in for the listening socket.

    accept() works through the scripted steps in order: exceptions are
    raised, (socket, address) pairs are returned, and callables are run
    with their result returned. Once the script is used up it raises
    socket.timeout, like an idle poll.
    """

    def __init__(self, *steps):
        self.steps = list(steps)
        self.accept_calls = 0

    def accept(self):
        self.accept_calls += 1
        if not self.steps:
            raise socket.timeout("timed out")
        step = self.steps.pop(0)
        if isinstance(step, BaseException):
            raise step
        if callable(step):
            return step()
        return step


def make_server(listener) -> SocketServer:
    server = SocketServer(ServerConfig(buffer_size=4096, timeout=2.0))
    server._socket = listener
    server._running = True
    return server


class TestAcceptLoop:
    """Tests for SocketServer._accept_loop()."""

    def test_accept_error_is_not_fatal(self, fake_socket_factory):
        """A failed accept() is logged and the next client is still served."""
        client = fake_socket_factory()
        handled = []

        def handler(conn):
            handled.append(conn)
            server.shutdown()

        listener = ScriptedListener(
            OSError(24, "Too many open files"),
            (client, ("10.0.0.9", 41000)),
        )
        server = make_server(listener)

        server._accept_loop(handler)

        assert len(handled) == 1
        assert isinstance(handled[0], Connection)
        assert handled[0].socket is client
        assert handled[0].address == ("10.0.0.9", 41000)
        assert listener.accept_calls == 2

    def test_connection_gets_configured_limits(self, fake_socket_factory):
        handled = []

        def handler(conn):
            handled.append(conn)
            server.shutdown()

        server = make_server(ScriptedListener((fake_socket_factory(), ("10.0.0.9", 41001))))

        server._accept_loop(handler)

        assert handled[0].buffer_size == 4096
        assert handled[0].timeout == 2.0

    def test_poll_timeout_keeps_looping(self, fake_socket_factory):
        """Idle polls are not errors; the loop waits for the next client."""
        handled = []

        def handler(conn):
            handled.append(conn)
            server.shutdown()

        listener = ScriptedListener(
            socket.timeout("timed out"),
            socket.timeout("timed out"),
            (fake_socket_factory(), ("10.0.0.9", 41002)),
        )
        server = make_server(listener)

        server._accept_loop(handler)

        assert len(handled) == 1
        assert listener.accept_calls == 3

    def test_shutdown_during_poll_ends_loop(self):
        def stop_then_time_out():
            server.shutdown()
            raise socket.timeout("timed out")

        listener = ScriptedListener(stop_then_time_out)
        server = make_server(listener)

        server._accept_loop(lambda conn: None)

        assert listener.accept_calls == 1
        assert not server.is_running

    def test_error_after_shutdown_ends_loop(self):
        """accept() on a closed listener raises; that is the normal exit."""
        def stop_then_fail():
            server.shutdown()
            raise OSError(9, "Bad file descriptor")

        listener = ScriptedListener(stop_then_fail)
        server = make_server(listener)

        server._accept_loop(lambda conn: None)

        assert listener.accept_calls == 1
