"""HTTP/1.1 request parsing, response writing, a small TCP server and demo commands."""

__version__ = "0.1.0"
__all__ = ["headers", "request", "response", "server", "httpserver", "tcplistener", "udpsender"]