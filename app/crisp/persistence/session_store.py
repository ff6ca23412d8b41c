"""
Purpose: Keep the interview store's snapshot across restarts.
The store calls load() once on init and save() after every mutation; what
goes in is an already-encoded, versioned blob (see codec.py).

What is inside:
InMemoryStateStore: default / tests.
JsonFileStateStore: one JSON file, written atomically.

Testing:
In-memory: simple state tests.
File: tmp_path fixture; corrupt and missing file handling.
"""

from __future__ import annotations
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class InMemoryStateStore:
    def __init__(self, blob: Optional[dict[str, Any]] = None) -> None:
        self._blob = copy.deepcopy(blob) if blob is not None else None
        self.saves = 0

    def load(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self._blob) if self._blob is not None else None

    def save(self, blob: dict[str, Any]) -> None:
        self._blob = copy.deepcopy(blob)
        self.saves += 1

    def reset(self) -> None:
        self._blob = None


class JsonFileStateStore:
    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: not a JSON object", self.path)
            return None
        return data

    def save(self, blob: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            prefix=self.path.name, suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(blob, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def reset(self) -> None:
        self.path.unlink(missing_ok=True)
