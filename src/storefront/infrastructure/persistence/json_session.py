"""Change tracking for one unit of work over the JSON document.

The session works on a private copy of the document.  For every record it
remembers the version it first saw; ``apply_to`` later refuses to write
over a record whose version moved in the meantime.  A record that did not
exist counts as version 0.
"""

from __future__ import annotations

import copy

from storefront.domain.exceptions import ConcurrentModificationError

_Key = tuple[str, str]


class JsonSession:

    def __init__(self, document: dict) -> None:
        self._doc = copy.deepcopy(document)
        self._base_sequences = dict(self._doc["sequences"])
        self._seen: dict[_Key, int] = {}
        self._upserts: dict[_Key, dict] = {}
        self._deletes: set[_Key] = set()
        self._allocated: set[str] = set()

    @property
    def has_changes(self) -> bool:
        return bool(self._upserts or self._deletes or self._allocated)

    # --- Reads ----------------------------------------------------------------

    def get(self, collection: str, key: str) -> dict | None:
        self._observe(collection, key)
        raw = self._doc[collection].get(key)
        return copy.deepcopy(raw) if raw is not None else None

    def values(self, collection: str) -> list[dict]:
        result = []
        for key in list(self._doc[collection]):
            raw = self.get(collection, key)
            if raw is not None:
                result.append(raw)
        return result

    # --- Writes ---------------------------------------------------------------

    def put(self, collection: str, key: str, raw: dict) -> int:
        """Stage an upsert and return the record's new version."""
        seen = self._observe(collection, key)
        record = copy.deepcopy(raw)
        record["version"] = seen + 1
        self._doc[collection][key] = record
        self._upserts[(collection, key)] = record
        self._deletes.discard((collection, key))
        return record["version"]

    def delete(self, collection: str, key: str) -> None:
        self._observe(collection, key)
        self._doc[collection].pop(key, None)
        self._upserts.pop((collection, key), None)
        self._deletes.add((collection, key))

    def next_value(self, sequence: str) -> int:
        self._doc["sequences"][sequence] += 1
        self._allocated.add(sequence)
        return self._doc["sequences"][sequence]

    # --- Commit ---------------------------------------------------------------

    def apply_to(self, fresh: dict) -> None:
        """Check this session against ``fresh`` and merge its changes in place.

        Raises ConcurrentModificationError, leaving ``fresh`` untouched, if
        any record this session writes changed since it was read.
        """
        for collection, key in [*self._upserts, *self._deletes]:
            current = fresh[collection].get(key)
            current_version = current.get("version", 0) if current is not None else 0
            if current_version != self._seen[(collection, key)]:
                raise ConcurrentModificationError(
                    f"{collection} record '{key}' was modified concurrently"
                )
        for sequence in self._allocated:
            if fresh["sequences"][sequence] != self._base_sequences[sequence]:
                raise ConcurrentModificationError(
                    f"Id sequence '{sequence}' advanced concurrently"
                )

        for (collection, key), record in self._upserts.items():
            fresh[collection][key] = record
        for collection, key in self._deletes:
            fresh[collection].pop(key, None)
        for sequence in self._allocated:
            fresh["sequences"][sequence] = max(
                fresh["sequences"][sequence], self._doc["sequences"][sequence]
            )

    def _observe(self, collection: str, key: str) -> int:
        """Version this session saw for a record, recorded on first access."""
        if (collection, key) not in self._seen:
            raw = self._doc[collection].get(key)
            self._seen[(collection, key)] = raw.get("version", 0) if raw is not None else 0
        return self._seen[(collection, key)]
