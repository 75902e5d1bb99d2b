"""
Key-value persistence layer (JSON file or MongoDB).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pymongo import MongoClient
from pymongo.errors import PyMongoError


logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.getenv("RX_BARCODE_DATA_DIR", str(BASE_DIR / "data")))
JSON_PATH = DATA_DIR / "store.json"
PERSISTENCE_BACKEND = os.getenv("PERSISTENCE_BACKEND", "")
MONGODB_URI = os.getenv("MONGODB_URI", "")
MONGODB_DB = os.getenv("MONGODB_DB", "RxBarcodes")

_store = None


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _backend() -> str:
    if PERSISTENCE_BACKEND:
        return PERSISTENCE_BACKEND.strip().lower()
    if not MONGODB_URI:
        return "json"
    return "mongodb"


class JsonKeyValueStore:
    """
    All values in one JSON document: {"values": {key: value}}.

    Writes replace the whole file through a temp file and os.replace.
    """

    def __init__(self, path: Path = JSON_PATH):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"values": {}}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Unreadable store %s, starting empty: %s", self.path, exc)
            return {"values": {}}
        if not isinstance(payload, dict) or not isinstance(payload.get("values"), dict):
            logger.warning("Unexpected layout in %s, starting empty", self.path)
            return {"values": {}}
        return payload

    def _save(self, payload: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=True, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._load()["values"].get(key, default)

    def set(self, key: str, value: Any) -> None:
        payload = self._load()
        payload["values"][key] = value
        payload["updated_at"] = _utc_now()
        self._save(payload)

    def ping(self) -> bool:
        return True


class MongoKeyValueStore:
    """One document per key in the "kv" collection."""

    def __init__(self, uri: str = MONGODB_URI, db_name: str = MONGODB_DB, client: Optional[MongoClient] = None):
        if client is None:
            if not uri:
                raise ValueError("MONGODB_URI is required for MongoDB backend.")
            client = MongoClient(uri)
        self.client = client
        self.collection = client[db_name].kv

    def get(self, key: str, default: Any = None) -> Any:
        doc = self.collection.find_one({"_id": key})
        if not doc:
            return default
        return doc.get("value", default)

    def set(self, key: str, value: Any) -> None:
        self.collection.update_one(
            {"_id": key},
            {"$set": {"key": key, "value": value, "updated_at": _utc_now()}},
            upsert=True,
        )

    def ping(self) -> bool:
        try:
            self.client.admin.command("ping")
            return True
        except PyMongoError:
            return False


def get_store():
    """Process-wide store for the configured backend."""
    global _store
    if _store is None:
        if _backend() == "json":
            _store = JsonKeyValueStore(JSON_PATH)
        else:
            _store = MongoKeyValueStore(MONGODB_URI, MONGODB_DB)
        logger.info("Using %s persistence backend", _backend())
    return _store


def check_connection() -> bool:
    return get_store().ping()


def set_setting(key: str, value: Any) -> None:
    get_store().set(f"settings.{key}", value)


def get_setting(key: str, default: Any = None) -> Any:
    return get_store().get(f"settings.{key}", default)
