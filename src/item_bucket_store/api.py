"""Minimal REST API over a :class:`BucketedItemStore`.

Uses only the Python standard library (``http.server`` + ``json``).  The
server exposes:

* **GET    /health** — liveness probe (always returns 200).
* **GET    /count** — number of stored items.
* **GET    /items** — every stored item, in enumeration order.
* **GET    /items/<identifier>** — one item (identifier URL-encoded).
* **POST   /items** — fetch an item from the provider and store it.
* **POST   /items/manual** — store an item built from the request body.
* **DELETE /items/<identifier>** — remove one item.

The store is not thread-safe, so every handler takes one module-level lock
before touching it.

Start with::

    python -m item_bucket_store.api --port 8080
"""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlsplit

from .errors import DuplicateIdentifier, InvalidIdentifier, ItemNotFound, ProviderError
from .models import Item
from .provider.client import InMemoryItemProvider, ItemProvider, ProviderConfig
from .store import BucketedItemStore

_ITEMS_PREFIX = "/items/"

# Module-level store and provider (configured on server start).
_store: Optional[BucketedItemStore] = None
_provider: Optional[ItemProvider] = None
_lock = threading.Lock()


def _get_store() -> BucketedItemStore:
    global _store  # noqa: PLW0603
    if _store is None:
        _store = BucketedItemStore()
    return _store


def _get_provider() -> ItemProvider:
    global _provider  # noqa: PLW0603
    if _provider is None:
        _provider = InMemoryItemProvider()
    return _provider


def configure(
    store: BucketedItemStore | None = None,
    provider: ItemProvider | None = None,
) -> BucketedItemStore:
    """(Re)configure the module-level store and provider."""
    global _store, _provider  # noqa: PLW0603
    _store = store if store is not None else BucketedItemStore()
    if provider is not None:
        _provider = provider
    return _store


# ------------------------------------------------------------------
# Request handler
# ------------------------------------------------------------------


class _Handler(BaseHTTPRequestHandler):
    """HTTP request handler for the item API."""

    def _send_json(self, status: int, body: Dict[str, Any]) -> None:
        payload = json.dumps(body).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def _send_error(self, status: int, exc: Exception) -> None:
        self._send_json(status, {"error": str(exc), "type": type(exc).__name__})

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length", 0))
        return self.rfile.read(length)

    def _read_json(self) -> Optional[Dict[str, Any]]:
        """Parse request body as a JSON object; send 400 on failure."""
        try:
            raw = json.loads(self._read_body() or b"{}")
        except (json.JSONDecodeError, ValueError):
            self._send_json(400, {"error": "Invalid JSON"})
            return None
        if not isinstance(raw, dict):
            self._send_json(400, {"error": "Expected a JSON object"})
            return None
        return raw

    def _require_fields(self, raw: Dict[str, Any], fields: tuple) -> bool:
        """Validate required fields; send 400 on failure. Return True if ok."""
        missing = [f for f in fields if f not in raw]
        if missing:
            self._send_json(400, {"error": f"Missing fields: {', '.join(missing)}"})
            return False
        return True

    def _check_identifier(self, raw: Dict[str, Any]) -> bool:
        """Reject a non-string identifier with 400. Return True if ok."""
        identifier = raw.get("identifier")
        if identifier is not None and not isinstance(identifier, str):
            self._send_json(400, {"error": "identifier must be a string or null"})
            return False
        return True

    def _path(self) -> str:
        return urlsplit(self.path).path

    # --- GET /health ---------------------------------------------------

    def _handle_health(self) -> None:
        self._send_json(200, {"status": "ok"})

    # --- GET /count ----------------------------------------------------

    def _handle_count(self) -> None:
        with _lock:
            count = _get_store().count()
        self._send_json(200, {"count": count})

    # --- GET /items ----------------------------------------------------

    def _handle_list(self) -> None:
        with _lock:
            items = [item.to_dict() for item in _get_store().enumerate()]
        self._send_json(200, {"count": len(items), "items": items})

    # --- GET /items/<identifier> --------------------------------------

    def _handle_find(self, identifier: str) -> None:
        with _lock:
            item = _get_store().find(identifier)
            body = item.to_dict() if item is not None else None
        if body is None:
            self._send_json(404, {"error": "Item not found"})
            return
        self._send_json(200, body)

    # --- POST /items ---------------------------------------------------

    def _handle_fetch_and_insert(self) -> None:
        raw = self._read_json()
        if raw is None:
            return
        if not self._check_identifier(raw):
            return

        try:
            item = _get_provider().fetch_item(raw.get("identifier"))
        except ProviderError as exc:
            self._send_error(502, exc)
            return
        self._insert(item)

    # --- POST /items/manual --------------------------------------------

    def _handle_manual_insert(self) -> None:
        raw = self._read_json()
        if raw is None:
            return
        if not self._require_fields(raw, ("identifier",)):
            return
        if not self._check_identifier(raw):
            return

        try:
            code = int(raw.get("code", 0))
        except (TypeError, ValueError):
            self._send_json(400, {"error": "code must be an integer"})
            return
        self._insert(Item(identifier=raw["identifier"], code=code, timestamp=raw.get("timestamp")))

    def _insert(self, item: Item) -> None:
        try:
            with _lock:
                _get_store().insert(item)
        except InvalidIdentifier as exc:
            self._send_error(400, exc)
            return
        except DuplicateIdentifier as exc:
            self._send_error(409, exc)
            return
        self._send_json(201, item.to_dict())

    # --- DELETE /items/<identifier> -----------------------------------

    def _handle_remove(self, identifier: str) -> None:
        try:
            with _lock:
                _get_store().remove(identifier)
        except InvalidIdentifier as exc:
            self._send_error(400, exc)
            return
        except ItemNotFound as exc:
            self._send_error(404, exc)
            return
        self._send_json(200, {"removed": identifier})

    # --- Routing -------------------------------------------------------

    _POST_ROUTES: Dict[str, str] = {
        "/items": "_handle_fetch_and_insert",
        "/items/manual": "_handle_manual_insert",
    }

    def do_POST(self) -> None:  # noqa: N802
        handler_name = self._POST_ROUTES.get(self._path())
        if handler_name:
            getattr(self, handler_name)()
        else:
            self._send_json(404, {"error": "Not found"})

    def do_GET(self) -> None:  # noqa: N802
        path = self._path()
        if path == "/health":
            self._handle_health()
        elif path == "/count":
            self._handle_count()
        elif path == "/items":
            self._handle_list()
        elif path.startswith(_ITEMS_PREFIX):
            self._handle_find(unquote(path[len(_ITEMS_PREFIX):]))
        else:
            self._send_json(404, {"error": "Not found"})

    def do_DELETE(self) -> None:  # noqa: N802
        path = self._path()
        if path.startswith(_ITEMS_PREFIX):
            self._handle_remove(unquote(path[len(_ITEMS_PREFIX):]))
        else:
            self._send_json(404, {"error": "Not found"})

    # Suppress default stderr logging in tests
    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        pass


def create_server(
    host: str = "0.0.0.0",
    port: int = 8080,
    store: BucketedItemStore | None = None,
    provider: ItemProvider | None = None,
) -> HTTPServer:
    """Create (but do not start) the item HTTP server."""
    configure(store, provider=provider)
    return HTTPServer((host, port), _Handler)


# ------------------------------------------------------------------
# CLI entry-point
# ------------------------------------------------------------------


def main() -> None:  # pragma: no cover
    import argparse

    parser = argparse.ArgumentParser(description="Bucketed item store API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-fetches", type=int, default=0)
    args = parser.parse_args()

    provider = InMemoryItemProvider(
        config=ProviderConfig(seed=args.seed, max_fetches=args.max_fetches)
    )
    server = create_server(host=args.host, port=args.port, provider=provider)
    print(f"Serving on {args.host}:{args.port}")
    server.serve_forever()


if __name__ == "__main__":
    main()
