"""
Storage adapters for the journey document.

The journey lives as one JSON value under a well-known key. Adapters
only move that value in and out of a backing store:

- load() -> decoded document, or None when nothing was saved yet
- save(document) -> write the whole document

Adapters raise StorageUnavailable for I/O failures and
CorruptPersistedState when the stored text is not JSON. Schema
validation is the store's job (see schemas.parse_document).
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Protocol

import structlog

from src.config.settings import DEFAULT_STORAGE_KEY
from src.lib.exceptions import CorruptPersistedState, StorageUnavailable

logger = structlog.get_logger(__name__)


class JourneyJSONEncoder(json.JSONEncoder):
    """
    JSON encoder for journey documents.

    Models serialize themselves to plain types; only datetimes inside
    free-form spirit attributes reach this hook. Anything else still
    raises TypeError so bad attributes are caught at bond time instead of
    being persisted as garbage.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


def encode_document(document: dict[str, Any]) -> str:
    """Serialize a document to JSON text."""
    return json.dumps(document, cls=JourneyJSONEncoder, ensure_ascii=False)


def decode_document(raw: str) -> Any:
    """Parse stored JSON text.

    Raises:
        CorruptPersistedState: If the text is not valid JSON
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise CorruptPersistedState(f"journey document is not valid JSON: {exc}") from exc


class StorageAdapter(Protocol):
    """Backing store for the journey document."""

    key: str

    def load(self) -> Any | None:
        """Return the decoded document, or None if nothing is stored."""
        ...

    def save(self, document: dict[str, Any]) -> None:
        """Persist the whole document."""
        ...


class InMemoryStorage:
    """Process-local store that keeps the serialized text, like browser local storage.

    Documents go through the same JSON encoding as on disk, so tests
    exercise the real round trip.
    """

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.key = key
        self._data: dict[str, str] = {}

    @property
    def raw(self) -> str | None:
        """The stored text under this adapter's key."""
        return self._data.get(self.key)

    def seed(self, raw: str) -> None:
        """Place raw text under the key (used to simulate old or damaged data)."""
        self._data[self.key] = raw

    def load(self) -> Any | None:
        raw = self._data.get(self.key)
        if raw is None:
            return None
        return decode_document(raw)

    def save(self, document: dict[str, Any]) -> None:
        self._data[self.key] = encode_document(document)


class JsonFileStorage:
    """Stores the document as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory followed by
    os.replace(), so a crash mid-write never leaves a half-written
    document behind. A file that cannot be parsed is moved aside to
    ``<key>.json.corrupt-<timestamp>`` before the error is raised.
    """

    def __init__(self, directory: str | Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.key = key
        self.directory = Path(directory)

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> Any | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            self._quarantine()
            raise CorruptPersistedState(f"journey document is not UTF-8: {exc}") from exc
        except OSError as exc:
            raise StorageUnavailable(f"cannot read {self.path}: {exc}") from exc

        try:
            return decode_document(raw)
        except CorruptPersistedState:
            self._quarantine()
            raise

    def save(self, document: dict[str, Any]) -> None:
        tmp_name: str | None = None
        try:
            data = encode_document(document).encode("utf-8")
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=self.directory,
                prefix=f".{self.key}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except UnicodeEncodeError as exc:
            raise StorageUnavailable(f"cannot encode {self.path} as UTF-8: {exc.reason}") from exc
        except OSError as exc:
            raise StorageUnavailable(f"cannot write {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def _quarantine(self) -> Path | None:
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, target)
        except OSError as exc:
            logger.warning(
                "journey_quarantine_failed", path=str(self.path), error=str(exc)
            )
            return None
        logger.warning("journey_document_quarantined", path=str(target))
        return target
