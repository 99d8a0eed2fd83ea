"""HTTP server for sovereign-identity using stdlib http.server.

Routes:
    POST   /identities                                  — create an identity
    GET    /identities/{owner}                          — full record (404 if absent)
    GET    /identities/{owner}/scores                   — scores (defaulted)
    GET    /identities/{owner}/tier                     — tier (defaulted)
    GET    /identities/{owner}/composite                — composite (defaulted)
    PUT    /identities/{owner}/authorities/{dimension}  — delegate a dimension (owner)
    PUT    /identities/{owner}/scores/{dimension}       — write a score (authority)
    PUT    /identities/{owner}/details/{dimension}      — write details (authority)
    GET    /identities/{owner}/details/{dimension}      — read details
    GET    /health                                      — health check

Mutations carry the caller principal in the ``X-Sovereign-Caller`` header.

Usage:
    python -m sovereign_identity.server.app --port 8080
    python -m sovereign_identity.server.app --store-file state.json
"""
from __future__ import annotations

import argparse
import json
import logging
import re
import threading
import urllib.parse
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from sovereign_identity.client import SovereignClient
from sovereign_identity.config import SovereignConfig
from sovereign_identity.server import routes
from sovereign_identity.store.snapshot import load_snapshot, save_snapshot

logger = logging.getLogger(__name__)

CALLER_HEADER = "X-Sovereign-Caller"

_IDENTITY_PATTERN = re.compile(r"^/identities/([^/]+)$")
_READ_PATTERN = re.compile(r"^/identities/([^/]+)/(scores|tier|composite)$")
_DIMENSION_PATTERN = re.compile(r"^/identities/([^/]+)/(authorities|scores|details)/([^/]+)$")

_snapshot_file: Path | None = None
_snapshot_lock = threading.Lock()


def _persist() -> None:
    """Write the current state to the snapshot file, if one is configured."""
    if _snapshot_file is None:
        return
    client = routes.get_client()
    with _snapshot_lock:
        save_snapshot(client.store, client.ledger, _snapshot_file)


class SovereignIdentityHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the sovereign-identity server.

    Implements routing for GET, POST, and PUT. All request bodies and
    responses use JSON.
    """

    def log_message(self, format: str, *args: object) -> None:
        """Override to route access logs through the Python logging system."""
        logger.debug(format, *args)

    # ── GET ───────────────────────────────────────────────────────────────────

    def do_GET(self) -> None:
        """Handle all GET requests by routing on the URL path."""
        path = self._path()

        if path == "/health":
            self._send_json(*routes.handle_health())
            return

        match = _IDENTITY_PATTERN.match(path)
        if match:
            self._send_json(*routes.handle_get_identity(match.group(1)))
            return

        match = _READ_PATTERN.match(path)
        if match:
            owner, view = match.groups()
            handler = {
                "scores": routes.handle_get_scores,
                "tier": routes.handle_get_tier,
                "composite": routes.handle_get_composite,
            }[view]
            self._send_json(*handler(owner))
            return

        match = _DIMENSION_PATTERN.match(path)
        if match and match.group(2) == "details":
            self._send_json(*routes.handle_get_details(match.group(1), match.group(3)))
            return

        self._not_found("GET", path)

    # ── POST ──────────────────────────────────────────────────────────────────

    def do_POST(self) -> None:
        """Handle all POST requests by routing on the URL path."""
        path = self._path()
        body = self._read_json_body()
        if body is None:
            return

        if path == "/identities":
            status, data = routes.handle_create_identity(body)
            self._commit(status)
            self._send_json(status, data)
        else:
            self._not_found("POST", path)

    # ── PUT ───────────────────────────────────────────────────────────────────

    def do_PUT(self) -> None:
        """Handle all PUT requests by routing on the URL path."""
        path = self._path()
        body = self._read_json_body()
        if body is None:
            return

        match = _DIMENSION_PATTERN.match(path)
        if not match:
            self._not_found("PUT", path)
            return

        owner, kind, dimension = match.groups()
        handler = {
            "authorities": routes.handle_set_authority,
            "scores": routes.handle_update_score,
            "details": routes.handle_update_details,
        }[kind]
        status, data = handler(owner, dimension, body, self.headers.get(CALLER_HEADER))
        self._commit(status)
        self._send_json(status, data)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _path(self) -> str:
        parsed = urllib.parse.urlparse(self.path)
        return urllib.parse.unquote(parsed.path.rstrip("/"))

    def _commit(self, status: int) -> None:
        if 200 <= status < 300:
            _persist()

    def _not_found(self, method: str, path: str) -> None:
        self._send_json(404, {"error": "Not found", "detail": f"No route for {method} {path}"})

    def _send_json(self, status: int, data: dict[str, object]) -> None:
        """Serialize *data* to JSON and send an HTTP response with *status*."""
        body = json.dumps(data, default=str).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_json_body(self) -> dict[str, object] | None:
        """Read and parse the JSON request body.

        Returns None (and sends a 400 error response) if parsing fails or the
        body is not a JSON object.
        """
        content_length = int(self.headers.get("Content-Length", 0))
        if content_length == 0:
            return {}

        raw = self.rfile.read(content_length)
        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._send_json(400, {"error": "Invalid JSON", "detail": str(exc)})
            return None
        if not isinstance(parsed, dict):
            self._send_json(400, {"error": "Invalid JSON", "detail": "Body must be a JSON object."})
            return None
        return parsed


def create_server(
    host: str = "127.0.0.1",
    port: int = 8080,
    store_file: str | Path | None = None,
) -> ThreadingHTTPServer:
    """Create (but do not start) the sovereign-identity HTTP server.

    Parameters
    ----------
    host:
        Bind address.
    port:
        TCP port to listen on.
    store_file:
        Optional snapshot file. Loaded now, rewritten after each successful
        mutation.

    Returns
    -------
    ThreadingHTTPServer
        A configured server instance ready to call ``serve_forever()`` on.

    Raises
    ------
    WireFormatError
        If *store_file* exists but does not hold a loadable snapshot.
    """
    global _snapshot_file
    _snapshot_file = Path(store_file) if store_file is not None else None
    store, ledger = load_snapshot(_snapshot_file)
    routes.configure(SovereignClient(store, ledger))

    server = ThreadingHTTPServer((host, port), SovereignIdentityHandler)
    logger.info(
        "sovereign-identity server created at http://%s:%d (%d identities loaded)",
        host,
        port,
        len(store),
    )
    return server


def run_server(config: SovereignConfig | None = None) -> None:
    """Create and run the sovereign-identity HTTP server (blocking)."""
    config = config if config is not None else SovereignConfig.from_env()
    server = create_server(host=config.host, port=config.port, store_file=config.store_file)
    logger.info(
        "Serving sovereign-identity on http://%s:%d (Ctrl-C to stop)", config.host, config.port
    )
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down sovereign-identity server.")
    finally:
        server.server_close()


def _build_arg_parser() -> argparse.ArgumentParser:
    defaults = SovereignConfig.from_env()
    parser = argparse.ArgumentParser(
        description="sovereign-identity HTTP server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", default=defaults.host, help="Bind address")
    parser.add_argument("--port", type=int, default=defaults.port, help="TCP port")
    parser.add_argument(
        "--store-file",
        default=str(defaults.store_file) if defaults.store_file else None,
        help="JSON snapshot file backing the store",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


if __name__ == "__main__":
    args = _build_arg_parser().parse_args()
    cfg = SovereignConfig(
        host=args.host, port=args.port, log_level=args.log_level, store_file=args.store_file
    )
    cfg.configure_logging()
    run_server(cfg)
