"""Unit tests for audit logging of store and provider events."""

import json

import pytest

from item_bucket_store.audit_logger import AuditLogger, get_audit_logger
from item_bucket_store.errors import DuplicateIdentifier, ItemNotFound, ProviderError
from item_bucket_store.models import Item
from item_bucket_store.provider import InMemoryItemProvider
from item_bucket_store.store import BucketedItemStore, StoreConfig


def _events(captured_err):
    return [json.loads(line) for line in captured_err.splitlines() if line.strip()]


def _structured(caplog):
    """Structured payloads of audit records seen by caplog."""
    return [
        r._structured
        for r in caplog.records
        if r.name == "item_bucket_store.audit"
    ]


# ---- AuditLogger ----------------------------------------------------------


def test_audit_logger_emits_json(capfd):
    """AuditLogger.log_event() emits a JSON line to stderr."""
    logger = AuditLogger("test.audit.json")
    logger.log_event("test_event", correlation_id="cid-1", extra_key="val")
    captured = capfd.readouterr()
    payload = json.loads(captured.err.strip())
    assert payload["event"] == "test_event"
    assert payload["correlation_id"] == "cid-1"
    assert payload["extra_key"] == "val"
    assert payload["logger"] == "test.audit.json"
    assert "timestamp" in payload


def test_audit_logger_returns_payload():
    logger = AuditLogger("test.audit.returns")
    result = logger.log_event("ev", foo="bar")
    assert result == {"event": "ev", "foo": "bar"}


def test_get_audit_logger_returns_instance():
    logger = get_audit_logger()
    assert isinstance(logger, AuditLogger)
    assert logger.name == "item_bucket_store.audit"


def test_handler_attached_once(capfd):
    AuditLogger("test.audit.once")
    logger = AuditLogger("test.audit.once")
    logger.log_event("single")
    captured = capfd.readouterr()
    assert len(_events(captured.err)) == 1


# ---- Store events ---------------------------------------------------------


def test_insert_and_remove_are_logged(caplog):
    store = BucketedItemStore()
    store.insert(Item("Cafe Noir"))
    store.remove("Cafe Noir")

    events = _structured(caplog)
    assert [e["event"] for e in events] == ["item_inserted", "item_removed"]
    assert events[0]["identifier"] == "Cafe Noir"
    assert events[0]["bucket"] == "C"
    assert events[0]["chain"] == 13


def test_rejections_are_logged_with_reason(caplog):
    store = BucketedItemStore()
    store.insert(Item("Cafe Noir"))
    caplog.clear()

    with pytest.raises(DuplicateIdentifier):
        store.insert(Item("Cafe Noir"))
    with pytest.raises(ValueError):
        store.insert(Item("cafe noir"))
    with pytest.raises(ItemNotFound):
        store.remove("Dark Orchid")

    assert [(e["event"], e["reason"]) for e in _structured(caplog)] == [
        ("item_insert_rejected", "duplicate_identifier"),
        ("item_insert_rejected", "invalid_identifier"),
        ("item_remove_rejected", "not_found"),
    ]


def test_lookups_are_not_logged(caplog):
    store = BucketedItemStore()
    store.insert(Item("Cafe Noir"))
    caplog.clear()

    store.find("Cafe Noir")
    store.find("Dark Orchid")
    list(store.enumerate())
    assert _structured(caplog) == []


def test_logging_can_be_disabled(caplog):
    store = BucketedItemStore(StoreConfig(log_events=False))
    store.insert(Item("Cafe Noir"))
    store.remove("Cafe Noir")
    assert _structured(caplog) == []


# ---- Provider events ------------------------------------------------------


def test_provider_fetch_events(caplog):
    provider = InMemoryItemProvider([("Cafe Noir", 1, "00:00:00")])
    provider.fetch_item("Cafe Noir")
    with pytest.raises(ProviderError):
        provider.fetch_item("Dark Orchid")

    events = _structured(caplog)
    assert events[0]["event"] == "item_fetched"
    assert events[0]["identifier"] == "Cafe Noir"
    assert events[1]["event"] == "item_fetch_failed"
    assert events[1]["reason"] == "unknown_identifier"
