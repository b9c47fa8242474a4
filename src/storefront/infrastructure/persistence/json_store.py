"""The on-disk JSON document behind every repository.

All collections live in one file so a unit of work can replace them
together in a single atomic rename.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

COLLECTIONS = (
    "catalog_items",
    "services",
    "customers",
    "addresses",
    "carts",
    "orders",
    "restock_subscriptions",
)

SEQUENCES = ("orders", "cart_lines")

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def empty_document() -> dict:
    doc: dict = {name: {} for name in COLLECTIONS}
    doc["sequences"] = {name: 0 for name in SEQUENCES}
    return doc


class JsonStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def lock(self) -> threading.Lock:
        """Lock serializing commits against this file within the process."""
        key = self._file_path.resolve()
        with _locks_guard:
            return _locks.setdefault(key, threading.Lock())

    def load(self) -> dict:
        doc = json.loads(self._file_path.read_text(encoding="utf-8"))
        # Older or hand-written files may lack some collections.
        for name in COLLECTIONS:
            doc.setdefault(name, {})
        sequences = doc.setdefault("sequences", {})
        for name in SEQUENCES:
            sequences.setdefault(name, 0)
        return doc

    def write(self, doc: dict) -> None:
        """Replace the file atomically: readers see the old or the new document."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._file_path.name}.", dir=self._file_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(doc, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self.write(empty_document())
