from __future__ import annotations

import json
import os
import re
import threading
import uuid
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from filelock import FileLock

from storyforge.logs import get_logger

logger = get_logger(__name__)

ID_RE = re.compile(r"^[0-9a-f]{32}$")
COLLECTION_RE = re.compile(r"^[a-z][a-z0-9_]*$")

Filter = dict[str, Any]
Sort = list[tuple[str, int]]


class StoreError(Exception):
    pass


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(ID_RE.match(value))


def _resolve(doc: Any, path: str) -> list[Any]:
    values = [doc]
    for part in path.split("."):
        nxt: list[Any] = []
        for value in values:
            if isinstance(value, dict):
                if part in value:
                    nxt.append(value[part])
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, dict) and part in item:
                        nxt.append(item[part])
        values = nxt
    return values


def _equals(values: list[Any], expected: Any) -> bool:
    if not values:
        return expected is None
    for value in values:
        if value == expected:
            return True
        if isinstance(value, list) and not isinstance(expected, list) and expected in value:
            return True
    return False


def _compare(values: list[Any], op: str, operand: Any) -> bool:
    for value in values:
        if value is None:
            continue
        try:
            if op == "$gt" and value > operand:
                return True
            if op == "$gte" and value >= operand:
                return True
            if op == "$lt" and value < operand:
                return True
            if op == "$lte" and value <= operand:
                return True
        except TypeError:
            continue
    return False


def _match_condition(values: list[Any], condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        for op, operand in condition.items():
            if op == "$in":
                if not any(_equals(values, item) for item in operand):
                    return False
            elif op == "$ne":
                if _equals(values, operand):
                    return False
            elif op in ("$gt", "$gte", "$lt", "$lte"):
                if not _compare(values, op, operand):
                    return False
            else:
                raise StoreError(f"unsupported operator: {op}")
        return True
    return _equals(values, condition)


def matches(doc: dict[str, Any], flt: Filter | None) -> bool:
    """Mongo-style filter evaluation: dotted paths, ``$in``/``$ne``/range operators and ``$or``."""
    if not flt:
        return True
    for key, condition in flt.items():
        if key == "$or":
            if not any(matches(doc, sub) for sub in condition):
                return False
            continue
        if not _match_condition(_resolve(doc, key), condition):
            return False
    return True


def sort_docs(docs: list[dict[str, Any]], sort: Sort | None) -> list[dict[str, Any]]:
    out = list(docs)
    for key, direction in reversed(sort or []):
        def sort_key(d: dict[str, Any], key: str = key) -> tuple[bool, Any]:
            values = _resolve(d, key)
            value = values[0] if values else None
            return (value is not None, value if value is not None else 0)

        out.sort(key=sort_key, reverse=direction < 0)
    return out


@dataclass
class _Txn:
    staged: dict[tuple[str, str], dict[str, Any] | None] = field(default_factory=dict)


@dataclass
class DocStore:
    """One directory per collection, one JSON file per document."""

    data_dir: Path

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, FileLock] = {}
        self._locks_guard = threading.Lock()
        self._local = threading.local()
        self._txn_lock = FileLock(str(self.data_dir / ".txn.lock"))

    def _collection_dir(self, collection: str) -> Path:
        if not COLLECTION_RE.match(collection):
            raise StoreError(f"invalid collection name: {collection!r}")
        base = self.data_dir.resolve()
        target = (base / collection).resolve()
        if target.parent != base:
            raise StoreError("Path traversal blocked")
        return target

    def _doc_path(self, collection: str, doc_id: str) -> Path:
        return self._collection_dir(collection) / f"{doc_id}.json"

    def _lock(self, collection: str) -> FileLock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                self._collection_dir(collection).mkdir(parents=True, exist_ok=True)
                lock = FileLock(str(self.data_dir / f".{collection}.lock"))
                self._locks[collection] = lock
            return lock

    def _txn(self) -> _Txn | None:
        return getattr(self._local, "txn", None)

    def _read_file(self, path: Path) -> dict[str, Any] | None:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(text)

    def _write_file(self, path: Path, doc: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)

    def _load(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        txn = self._txn()
        if txn is not None and (collection, doc_id) in txn.staged:
            return deepcopy(txn.staged[(collection, doc_id)])
        return self._read_file(self._doc_path(collection, doc_id))

    def _load_all(self, collection: str) -> list[dict[str, Any]]:
        cdir = self._collection_dir(collection)
        docs: dict[str, dict[str, Any]] = {}
        if cdir.exists():
            for fp in cdir.glob("*.json"):
                doc = self._read_file(fp)
                if doc is not None:
                    docs[fp.stem] = doc
        txn = self._txn()
        if txn is not None:
            for (coll, doc_id), staged in txn.staged.items():
                if coll != collection:
                    continue
                if staged is None:
                    docs.pop(doc_id, None)
                else:
                    docs[doc_id] = deepcopy(staged)
        return list(docs.values())

    def _save(self, collection: str, doc: dict[str, Any]) -> None:
        txn = self._txn()
        if txn is not None:
            txn.staged[(collection, doc["id"])] = deepcopy(doc)
            return
        with self._lock(collection):
            self._write_file(self._doc_path(collection, doc["id"]), doc)

    def _remove(self, collection: str, doc_id: str) -> None:
        txn = self._txn()
        if txn is not None:
            txn.staged[(collection, doc_id)] = None
            return
        with self._lock(collection):
            path = self._doc_path(collection, doc_id)
            if path.exists():
                path.unlink()

    def insert(self, collection: str, doc: dict[str, Any]) -> dict[str, Any]:
        doc = deepcopy(doc)
        doc.setdefault("id", new_id())
        if not is_valid_id(doc["id"]):
            raise StoreError(f"invalid id: {doc['id']!r}")
        with self._lock(collection):
            if self._load(collection, doc["id"]) is not None:
                raise StoreError(f"duplicate id in {collection}: {doc['id']}")
            self._save(collection, doc)
        return doc

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        if not is_valid_id(doc_id):
            return None
        return self._load(collection, doc_id)

    def find(self, collection: str, flt: Filter | None = None, sort: Sort | None = None) -> list[dict[str, Any]]:
        docs = [d for d in self._load_all(collection) if matches(d, flt)]
        return sort_docs(docs, sort)

    def find_one(self, collection: str, flt: Filter | None = None) -> dict[str, Any] | None:
        if flt and set(flt) == {"id"} and isinstance(flt["id"], str):
            return self.get(collection, flt["id"])
        found = self.find(collection, flt)
        return found[0] if found else None

    def count(self, collection: str, flt: Filter | None = None) -> int:
        return len(self.find(collection, flt))

    def update_fields(self, collection: str, doc_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        """Set top-level fields on one document; returns the new document or None if absent."""
        if not is_valid_id(doc_id):
            return None
        with self._lock(collection):
            doc = self._load(collection, doc_id)
            if doc is None:
                return None
            doc.update(deepcopy(fields))
            doc["id"] = doc_id
            self._save(collection, doc)
            return doc

    def increment(self, collection: str, doc_id: str, field_name: str, by: int = 1) -> dict[str, Any] | None:
        if not is_valid_id(doc_id):
            return None
        with self._lock(collection):
            doc = self._load(collection, doc_id)
            if doc is None:
                return None
            doc[field_name] = int(doc.get(field_name) or 0) + by
            self._save(collection, doc)
            return doc

    def replace(self, collection: str, doc: dict[str, Any]) -> dict[str, Any]:
        if not is_valid_id(doc.get("id")):
            raise StoreError(f"invalid id: {doc.get('id')!r}")
        with self._lock(collection):
            self._save(collection, deepcopy(doc))
        return doc

    def delete_one(self, collection: str, flt: Filter) -> int:
        with self._lock(collection):
            doc = self.find_one(collection, flt)
            if doc is None:
                return 0
            self._remove(collection, doc["id"])
            return 1

    def delete_many(self, collection: str, flt: Filter | None = None) -> int:
        with self._lock(collection):
            docs = self.find(collection, flt)
            for doc in docs:
                self._remove(collection, doc["id"])
            return len(docs)

    @property
    def in_transaction(self) -> bool:
        return self._txn() is not None

    @contextmanager
    def transaction(self) -> Iterator["DocStore"]:
        """Stage writes until the block exits; an exception discards them.

        Nested blocks join the outermost transaction.
        """
        if self._txn() is not None:
            yield self
            return
        with self._txn_lock:
            txn = _Txn()
            self._local.txn = txn
            try:
                yield self
            except BaseException:
                self._local.txn = None
                logger.debug("transaction rolled back | staged=%d", len(txn.staged))
                raise
            self._local.txn = None
            self._commit(txn)

    def _commit(self, txn: _Txn) -> None:
        by_collection: dict[str, list[tuple[str, dict[str, Any] | None]]] = {}
        for (collection, doc_id), doc in txn.staged.items():
            by_collection.setdefault(collection, []).append((doc_id, doc))
        for collection, items in by_collection.items():
            with self._lock(collection):
                for doc_id, doc in items:
                    path = self._doc_path(collection, doc_id)
                    if doc is None:
                        if path.exists():
                            path.unlink()
                    else:
                        self._write_file(path, doc)
        logger.debug("transaction committed | staged=%d", len(txn.staged))
