"""Mock appcast server for integration testing.

Uses http.server to serve an appcast document from a background
thread on localhost.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Optional


class MockAppcastServer:
    """
    Local HTTP server that serves one appcast document.

    Usage:
        with MockAppcastServer(appcast_xml) as server:
            # Fetch server.url
            # server.requests lists the headers of each request
            pass
    """

    APPCAST_PATH = "/appcast.xml"

    def __init__(self, document: str = "", status: int = 200):
        """
        Initialize the mock server.

        Args:
            document: Appcast XML to serve
            status: HTTP status code to answer with
        """
        self.document = document
        self.status = status
        self.requests: List[Dict[str, str]] = []

        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        """URL of the served appcast."""
        if self._server is None:
            raise RuntimeError("Server not started")
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}{self.APPCAST_PATH}"

    def _make_handler(self):
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                server.requests.append(dict(self.headers.items()))
                if self.path != server.APPCAST_PATH:
                    self.send_error(404)
                    return

                body = server.document.encode("utf-8")
                self.send_response(server.status)
                self.send_header("Content-Type", "application/rss+xml")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format, *args):
                pass

        return Handler

    def start(self) -> None:
        """Start the server on a free port."""
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._make_handler())
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the server."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    def __enter__(self) -> "MockAppcastServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
