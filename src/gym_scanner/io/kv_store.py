"""
Key-value storage for JSON documents.

Keys are slash-separated paths such as ``workouts`` or
``history/<plan id>/<exercise uid>``.  A missing key and a key whose content
cannot be parsed both read as absent through ``get``; ``read`` tells the two
apart for callers that need to.
"""

import json
import logging
import os
import re
import shutil
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


class ReadStatus(str, Enum):
    MISSING = "missing"
    OK = "ok"
    CORRUPT = "corrupt"


class KeyValueStore(Protocol):
    def read(self, key: str) -> tuple[ReadStatus, Any]: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def delete_prefix(self, prefix: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


def _split_key(key: str) -> list[str]:
    parts = key.split("/")
    for part in parts:
        if not _SEGMENT.match(part):
            raise ValueError(f"Invalid storage key: {key!r}")
    return parts


class JsonFileStore:
    """
    One pretty-printed JSON file per key under ``root``.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so readers see either the old or the new
    document, never half of one.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root.joinpath(*_split_key(key)).with_suffix(".json")

    def read(self, key: str) -> tuple[ReadStatus, Any]:
        path = self.path_for(key)
        if not path.exists():
            return ReadStatus.MISSING, None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return ReadStatus.OK, json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Unreadable data for key '%s' at %s: %s", key, path, e)
            return ReadStatus.CORRUPT, None

    def get(self, key: str, default: Any = None) -> Any:
        status, value = self.read(key)
        return value if status is ReadStatus.OK else default

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    def delete_prefix(self, prefix: str) -> None:
        """Delete every key under ``prefix`` (a directory of keys)."""
        directory = self.root.joinpath(*_split_key(prefix))
        if directory.is_dir():
            shutil.rmtree(directory)
        self.delete(prefix)

    def keys(self, prefix: str = "") -> list[str]:
        base = self.root.joinpath(*_split_key(prefix)) if prefix else self.root
        if not base.is_dir():
            return []
        found = []
        for path in sorted(base.rglob("*.json")):
            rel = path.relative_to(self.root).with_suffix("")
            found.append("/".join(rel.parts))
        return found


class MemoryStore:
    """
    In-process store holding serialized JSON text.

    Values are round-tripped through ``json`` so callers never share mutable
    objects with the store, just as with files.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def put_raw(self, key: str, text: str) -> None:
        """Store raw text as-is (e.g. to simulate a damaged document)."""
        _split_key(key)
        self._data[key] = text

    def read(self, key: str) -> tuple[ReadStatus, Any]:
        if key not in self._data:
            return ReadStatus.MISSING, None
        try:
            return ReadStatus.OK, json.loads(self._data[key])
        except json.JSONDecodeError as e:
            logger.warning("Unreadable data for key '%s': %s", key, e)
            return ReadStatus.CORRUPT, None

    def get(self, key: str, default: Any = None) -> Any:
        status, value = self.read(key)
        return value if status is ReadStatus.OK else default

    def set(self, key: str, value: Any) -> None:
        _split_key(key)
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def delete_prefix(self, prefix: str) -> None:
        for key in self.keys(prefix):
            del self._data[key]
        self._data.pop(prefix, None)

    def keys(self, prefix: str = "") -> list[str]:
        if not prefix:
            return sorted(self._data)
        return sorted(k for k in self._data if k.startswith(prefix + "/"))
