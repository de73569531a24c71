import io
import socket
import sys

import pytest

from tcphttp.udpsender import main, send_lines


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5)
    yield sock
    sock.close()


@pytest.fixture
def sender(receiver):
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.connect(receiver.getsockname())
    yield sock
    sock.close()


class FailingSocket:
    def __init__(self):
        self.attempts = 0

    def send(self, data):
        self.attempts += 1
        raise OSError("connection refused")


def test_each_line_becomes_a_datagram(receiver, sender):
    output = io.StringIO()
    sent = send_lines(io.StringIO("hello\nworld\n"), sender, output)
    assert sent == 2
    assert receiver.recv(1024) == b"hello\n"
    assert receiver.recv(1024) == b"world\n"


def test_prompt_written_before_every_read(sender):
    output = io.StringIO()
    send_lines(io.StringIO("a\nb\n"), sender, output)
    assert output.getvalue() == ">" * 3


def test_final_line_without_newline_is_sent(receiver, sender):
    sent = send_lines(io.StringIO("abc"), sender, io.StringIO())
    assert sent == 1
    assert receiver.recv(1024) == b"abc"


def test_binary_stream_sent_unchanged(receiver, sender):
    sent = send_lines(io.BytesIO(b"raw\n"), sender, io.StringIO())
    assert sent == 1
    assert receiver.recv(1024) == b"raw\n"


def test_send_errors_are_skipped():
    sock = FailingSocket()
    sent = send_lines(io.StringIO("one\ntwo\n"), sock, io.StringIO())
    assert sent == 0
    assert sock.attempts == 2


def test_empty_input_sends_nothing(sender):
    output = io.StringIO()
    assert send_lines(io.StringIO(""), sender, output) == 0
    assert output.getvalue() == ">"


def test_main_sends_stdin(receiver, monkeypatch, capsys):
    host, port = receiver.getsockname()
    monkeypatch.setattr(sys, "stdin", io.StringIO("ping\n"))
    assert main(["--host", host, "--port", str(port)]) == 0
    assert receiver.recv(1024) == b"ping\n"
    assert capsys.readouterr().out == ">>"