import io
import socket
import threading
import time

from tcphttp.request import request_from_reader
from tcphttp.tcplistener import format_request, main


def parse(raw):
    return request_from_reader(io.BytesIO(raw))


def test_format_request_with_body():
    request = parse(
        b"POST /submit HTTP/1.1\r\n"
        b"Host: localhost:42069\r\n"
        b"Content-Length: 13\r\n"
        b"\r\n"
        b"hello world!\n"
    )
    assert format_request(request) == (
        "Request line:\n"
        "- Method: POST\n"
        "- Target: /submit\n"
        "- Version: 1.1\n"
        "Headers:\n"
        "- host: localhost:42069\n"
        "- content-length: 13\n"
        "Body:\n"
        "hello world!\n"
        "\n"
        "...\n"
    )


def test_format_request_without_body_lists_every_header():
    request = parse(
        b"GET / HTTP/1.1\r\nHost: localhost:42069\r\nUser-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n"
    )
    lines = format_request(request).splitlines()
    assert lines[:5] == [
        "Request line:",
        "- Method: GET",
        "- Target: /",
        "- Version: 1.1",
        "Headers:",
    ]
    assert "- host: localhost:42069" in lines
    assert "- user-agent: curl/7.81.0" in lines
    assert "- accept: */*" in lines
    assert lines[-3:] == ["Body:", "", "..."]


def _free_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def _send(port, data):
    deadline = time.monotonic() + 5
    while True:
        try:
            client = socket.create_connection(("127.0.0.1", port), timeout=5)
            break
        except OSError:
            if time.monotonic() > deadline:
                raise
            time.sleep(0.05)
    with client:
        client.sendall(data)
        client.shutdown(socket.SHUT_WR)
        while client.recv(1024):
            pass


def test_main_prints_requests_until_bad_one(capsys):
    port = _free_port()
    result = []
    thread = threading.Thread(
        target=lambda: result.append(main(["--port", str(port)])), daemon=True
    )
    thread.start()

    _send(port, b"GET /coffee HTTP/1.1\r\nHost: localhost:42069\r\n\r\n")
    _send(port, b"nonsense\r\n\r\n")
    thread.join(timeout=5)

    assert result == [1]
    out = capsys.readouterr().out
    assert "- Method: GET" in out
    assert "- Target: /coffee" in out
    assert "- host: localhost:42069" in out