"""HTTP server for Showsite.

Wires the section handlers and the static asset directory into an explicit route table,
runs the listener on a background thread and shuts it down gracefully on SIGINT or
SIGTERM:
- Each request runs on its own thread, so a slow disk read never blocks other requests.
- Asset requests are served byte-for-byte; directory listings are answered with a 404.
- Shutdown stops accepting connections, then waits for in-flight requests up to a
  fixed timeout.

Key classes:
- Route, RouteTable: Ordered prefix routes, first match wins.
- SiteServer: Owns the route table and the listener lifecycle.
- _SiteHTTPServer: Threading HTTP server that tracks in-flight request threads.
- _SiteRequestHandler: HTTP request handler dispatching through the route table.
"""

from __future__ import annotations

import functools
import logging
import signal
import threading
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote, urlsplit

from .config import load_config
from .resolver import Redirect
from .sections import Response, Section, SectionHandler
from .templates import PageTemplate, load_template

logger = logging.getLogger(__name__)

ASSET_PREFIX = "/assets"
BLOG_PREFIX = "/blog"
EPISODES_PREFIX = "/episodes"
PAGES_PREFIX = ""

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ServerError(Exception):
    """Fatal error in the server lifecycle."""


class ServerStartError(ServerError):
    """The listener could not be started.

    Attributes:
        address: Host and port the server tried to bind.
        original_error: The original exception that was caught.
    """

    def __init__(self, address: tuple[str, int], original_error: Exception):
        self.address = address
        self.original_error = original_error
        host, port = address
        super().__init__(
            f"Server failed to start on {host or '0.0.0.0'}:{port}: {original_error}"
        )


class ShutdownTimeoutError(ServerError):
    """In-flight requests did not finish within the shutdown timeout.

    Attributes:
        timeout: Seconds that were allowed.
    """

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Server shutdown did not complete within {timeout:g}s")


@dataclass(frozen=True)
class Route:
    """A URL prefix bound to a section.

    Attributes:
        prefix: URL prefix without trailing slash; ``""`` matches every path.
        section: Section served under the prefix.
        handler: Section handler, None for the asset pass-through.
    """

    prefix: str
    section: Section
    handler: SectionHandler | None = None

    def matches(self, path: str) -> bool:
        if not self.prefix:
            return True
        return path == self.prefix or path.startswith(f"{self.prefix}/")


class RouteTable:
    """Ordered list of routes, evaluated first to last."""

    def __init__(self, routes: Iterable[Route]):
        self._routes = tuple(routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, path: str) -> Route | None:
        """Return the first route whose prefix matches the path."""
        for route in self._routes:
            if route.matches(path):
                return route
        return None


class _SiteRequestHandler(SimpleHTTPRequestHandler):
    """HTTP request handler that dispatches through the server's route table.

    ``directory`` (the asset root) is bound with functools.partial; section routes
    never touch it.
    """

    server: _SiteHTTPServer

    def do_GET(self):
        self._dispatch(head_only=False)

    def do_HEAD(self):
        self._dispatch(head_only=True)

    def _dispatch(self, head_only: bool) -> None:
        path = unquote(urlsplit(self.path).path) or "/"
        route = self.server.routes.match(path)
        if route is None:
            self._send(Response.text(404, "File not found"), head_only)
            return
        if route.section is Section.ASSET:
            if path == route.prefix:
                self._send(Response.redirect(Redirect(f"{route.prefix}/")), head_only)
            elif "\x00" in path:
                self._send(Response.text(404, "File not found"), head_only)
            elif head_only:
                super().do_HEAD()
            else:
                super().do_GET()
            return
        self._send(route.handler.handle(path), head_only)

    def _send(self, response: Response, head_only: bool) -> None:
        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        self.send_header("Content-Length", str(len(response.body)))
        if response.content_type.startswith("text/plain"):
            self.send_header("X-Content-Type-Options", "nosniff")
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.end_headers()
        if not head_only:
            self.wfile.write(response.body)

    def translate_path(self, path):
        # Routing matched the decoded path, so the prefix is stripped after decoding.
        decoded = unquote(urlsplit(path).path)
        if decoded.startswith(f"{ASSET_PREFIX}/"):
            path = quote(decoded[len(ASSET_PREFIX) :])
        return super().translate_path(path)

    def list_directory(self, path):
        # Never expose directory listings; treat as missing content.
        self.send_error(404, "File not found")
        return None

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)


class _SiteHTTPServer(ThreadingHTTPServer):
    """Thread-per-request HTTP server that can wait for in-flight requests.

    Attributes:
        routes: Route table consulted by every request.
    """

    daemon_threads = True

    def __init__(self, server_address, handler_class, routes: RouteTable):
        self.routes = routes
        self._active: set[threading.Thread] = set()
        self._active_lock = threading.Lock()
        super().__init__(server_address, handler_class)

    def process_request(self, request, client_address):
        thread = threading.Thread(
            target=self.process_request_thread,
            args=(request, client_address),
            daemon=self.daemon_threads,
        )
        with self._active_lock:
            self._active.add(thread)
        thread.start()

    def process_request_thread(self, request, client_address):
        try:
            super().process_request_thread(request, client_address)
        finally:
            with self._active_lock:
                self._active.discard(threading.current_thread())

    @property
    def active_requests(self) -> int:
        with self._active_lock:
            return len(self._active)

    def wait_for_requests(self, timeout: float) -> bool:
        """Block until every in-flight request has finished.

        Args:
            timeout: Maximum seconds to wait.

        Returns:
            True when no request is left running, False on timeout.
        """
        deadline = time.monotonic() + timeout
        while True:
            with self._active_lock:
                pending = list(self._active)
            if not pending:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            pending[0].join(remaining)


class SiteServer:
    """Markdown site server with graceful shutdown.

    Attributes:
        project_root: Directory holding template.html and the content folders.
        config: Site configuration.
        host: Interface to bind, ``""`` for all.
        port: Port to bind; 0 picks a free one.
        shutdown_timeout: Seconds allowed for in-flight requests on shutdown.
        template: Shared page layout, loaded once.
        routes: Route table handed to the HTTP server.
        poll_interval: Seconds between checks for a stop request in run().
    """

    poll_interval = 0.1

    def __init__(
        self,
        project_root: Path,
        config: dict[str, Any] | None = None,
        template: PageTemplate | None = None,
    ):
        """Initialize the server and load the page template.

        Args:
            project_root: Root directory of the project.
            config: Optional configuration; loaded from showsite.yaml when omitted.
            template: Optional preloaded template.

        Raises:
            TemplateLoadError: The template is missing or does not compile.
        """
        self.project_root = project_root
        self.config = config if config is not None else load_config(project_root)
        self.host = str(self.config.get("host", ""))
        self.port = int(self.config.get("port", 8080))
        self.shutdown_timeout = float(self.config.get("shutdown_timeout", 5.0))
        self.assets_root = project_root / self.config.get("assets_dir", "assets")
        self.template = template or load_template(
            project_root / self.config.get("template", "template.html")
        )
        self.routes = self._build_routes()
        self._httpd: _SiteHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._listener_error: BaseException | None = None
        self._stop_requested: int | None = None

    def _build_routes(self) -> RouteTable:
        def section(kind: Section, prefix: str, key: str) -> Route:
            root = self.project_root / self.config.get(key, kind.value)
            return Route(prefix, kind, SectionHandler(kind, prefix, root, self.template))

        return RouteTable(
            [
                Route(ASSET_PREFIX, Section.ASSET),
                section(Section.BLOG, BLOG_PREFIX, "blog_dir"),
                section(Section.EPISODE, EPISODES_PREFIX, "episodes_dir"),
                section(Section.PAGE, PAGES_PREFIX, "pages_dir"),
            ]
        )

    @property
    def address(self) -> tuple[str, int]:
        if self._httpd is not None:
            return self.host, self._httpd.server_address[1]
        return self.host, self.port

    def start(self) -> None:
        """Bind the listener and serve on a background thread.

        Raises:
            ServerStartError: The address could not be bound.
        """
        handler = functools.partial(_SiteRequestHandler, directory=str(self.assets_root))
        try:
            self._httpd = _SiteHTTPServer((self.host, self.port), handler, self.routes)
        except OSError as exc:
            raise ServerStartError((self.host, self.port), exc) from exc
        self._thread = threading.Thread(
            target=self._serve, name="showsite-http", daemon=True
        )
        self._thread.start()
        host, port = self.address
        logger.info("Server is running on http://%s:%d", host or "localhost", port)

    def _serve(self) -> None:
        try:
            self._httpd.serve_forever()
        except Exception as exc:
            self._listener_error = exc
            logger.exception("Server failed")

    def request_stop(self, signum: int = signal.SIGTERM) -> None:
        """Ask run() to shut down, as if the given signal had arrived."""
        self._stop_requested = signum

    def _on_signal(self, signum, frame) -> None:
        self.request_stop(signum)

    def run(self) -> None:
        """Serve until SIGINT or SIGTERM, then shut down gracefully.

        Must be called from the main thread.

        Raises:
            ServerStartError: The listener could not be started.
            ServerError: The listener stopped unexpectedly.
            ShutdownTimeoutError: In-flight requests outlived the timeout.
        """
        previous = {sig: signal.signal(sig, self._on_signal) for sig in SHUTDOWN_SIGNALS}
        try:
            self.start()
            while self._stop_requested is None and self._thread.is_alive():
                time.sleep(self.poll_interval)
            if self._stop_requested is None:
                self.stop()
                raise ServerError(f"Server stopped unexpectedly: {self._listener_error}")
            logger.info(
                "Received signal: %s, shutting down...",
                signal.Signals(self._stop_requested).name,
            )
            self.stop()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    def stop(self, timeout: float | None = None) -> None:
        """Stop accepting connections and drain in-flight requests.

        Args:
            timeout: Seconds allowed; defaults to ``shutdown_timeout``.

        Raises:
            ShutdownTimeoutError: Requests were still running when time ran out.
        """
        httpd = self._httpd
        if httpd is None:
            return
        timeout = self.shutdown_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        try:
            stopper = threading.Thread(target=httpd.shutdown, daemon=True)
            stopper.start()
            stopper.join(timeout)
            if stopper.is_alive():
                raise ShutdownTimeoutError(timeout)
            if not httpd.wait_for_requests(deadline - time.monotonic()):
                raise ShutdownTimeoutError(timeout)
        finally:
            httpd.server_close()
            self._httpd = None
        logger.info("Server gracefully stopped")
