import io
import socket

import pytest

from httpfromtcp.udpsender import main, send_lines


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2)
    yield sock
    sock.close()


@pytest.fixture
def sender(receiver):
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.connect(receiver.getsockname())
    yield sock
    sock.close()


def test_send_lines_sends_each_line(receiver, sender):
    out = io.StringIO()
    count = send_lines(sender, ["hello\n", "world\n"], out)

    assert count == 2
    assert receiver.recv(1024) == b"hello\n"
    assert receiver.recv(1024) == b"world\n"
    assert out.getvalue() == "> Message sent: hello\n> Message sent: world\n> "


def test_send_lines_drops_unterminated_last_line(receiver, sender):
    out = io.StringIO()
    count = send_lines(sender, ["one\n", "partial"], out)

    assert count == 1
    assert receiver.recv(1024) == b"one\n"
    receiver.settimeout(0.2)
    with pytest.raises(TimeoutError):
        receiver.recv(1024)
    assert "partial" not in out.getvalue()


def test_send_lines_with_no_input(sender):
    out = io.StringIO()
    assert send_lines(sender, [], out) == 0
    assert out.getvalue() == "> "


def test_main_sends_stdin(receiver, monkeypatch, capsys):
    port = receiver.getsockname()[1]
    monkeypatch.setattr("sys.stdin", io.StringIO("ping\npong\n"))

    assert main(["--host", "127.0.0.1", "--port", str(port)]) == 0

    assert receiver.recv(1024) == b"ping\n"
    assert receiver.recv(1024) == b"pong\n"
    assert "Message sent: pong\n" in capsys.readouterr().out