"""Read lines from standard input and send each one as a UDP datagram."""

from __future__ import annotations

import argparse
import logging
import socket
import sys

log = logging.getLogger(__name__)

HOST = "localhost"
PORT = 42069


def send_lines(stream, sock, output) -> int:
    """Prompt on ``output``, send each line of ``stream`` over ``sock``.

    Stops at end of input and returns the number of lines sent.
    """
    sent = 0
    while True:
        output.write(">")
        output.flush()
        try:
            line = stream.readline()
        except (OSError, ValueError) as exc:
            log.warning("Error reading line: %s", exc)
            break
        if not line:
            break
        data = line if isinstance(line, bytes) else line.encode()
        try:
            sock.send(data)
        except OSError as exc:
            log.warning("Error writing to connection: %s", exc)
            continue
        sent += 1
    return sent


def main(argv=None) -> int:
    """Send standard input, line by line, to a UDP address."""
    parser = argparse.ArgumentParser(prog="udpsender", description=__doc__)
    parser.add_argument("--host", default=HOST, help="host to send to")
    parser.add_argument("--port", type=int, default=PORT, help="port to send to")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        family, kind, proto, _, address = socket.getaddrinfo(
            args.host, args.port, type=socket.SOCK_DGRAM
        )[0]
    except socket.gaierror as exc:
        log.error("Unable to resolve UDP address: %s", exc)
        return 1

    try:
        sock = socket.socket(family, kind, proto)
        sock.connect(address)
    except OSError as exc:
        log.error("Unable to open connection: %s", exc)
        return 1

    with sock:
        try:
            send_lines(sys.stdin, sock, sys.stdout)
        except KeyboardInterrupt:
            pass
    return 0