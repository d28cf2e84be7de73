# fragnav/server.py

import http.server
import logging
import socketserver
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class FragmentRequestHandler(http.server.SimpleHTTPRequestHandler):
    """
    Serves fragment files from `base_directory` and forbids caching, so a
    forced reload always sees the file as it is on disk.
    """
    base_directory: str = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, directory=self.base_directory, **kwargs)

    def end_headers(self):
        self.send_header("Cache-Control", "no-store, no-cache, must-revalidate")
        self.send_header("Access-Control-Allow-Origin", "*")
        super().end_headers()

    def log_message(self, format, *args):
        logger.debug("[FragmentServer] " + format, *args)


class FragmentServer(threading.Thread):
    """
    A static fragment server that runs in a background thread.

    Args:
        directory (str): Directory holding the fragment files.
        port (int): Port to listen on; 0 picks a free one, readable from `port` after `start()`.
    """

    def __init__(self, directory, port: int = 0, host: str = "127.0.0.1"):
        super().__init__(daemon=True)
        self.directory = str(Path(directory).resolve())
        self.host = host
        self.port = port
        self.server: Optional[socketserver.TCPServer] = None
        self._ready = threading.Event()
        self._error: Optional[OSError] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    def start(self):
        """Starts serving and blocks until the socket is bound."""
        super().start()
        self._ready.wait(timeout=5)
        if self._error is not None:
            raise self._error
        return self

    def run(self):
        # Per-instance handler class, so each server gets its own directory.
        class Handler(FragmentRequestHandler):
            base_directory = self.directory

        try:
            httpd = socketserver.ThreadingTCPServer((self.host, self.port), Handler)
        except OSError as e:
            logger.error("❌ [FragmentServer] could not bind %s:%s: %s", self.host, self.port, e)
            self._error = e
            self._ready.set()
            return

        httpd.daemon_threads = True
        with httpd:
            self.server = httpd
            self.port = httpd.server_address[1]
            logger.info("✅ [FragmentServer] serving %s on %s", self.directory, self.base_url)
            self._ready.set()
            httpd.serve_forever()

    def stop(self):
        """Stops the HTTP server if it is running."""
        if self.server:
            logger.info("[FragmentServer] shutting down...")
            self.server.shutdown()
            self.server = None
        if self.is_alive():
            self.join(timeout=5)
