"""Persistence utilities for the spending report core."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .exceptions import PersistenceError


class JSONStorage:
    """Simple file-based JSON storage with crash-safe writes.

    Each resource is a single file under ``base_path`` that is overwritten
    wholesale on every save.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def load(self, resource: str, expected: type = list) -> Optional[Any]:
        """Return the decoded payload, or ``None`` when the resource does not exist yet."""
        path = self._base_path / resource
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not isinstance(payload, expected):
            raise PersistenceError(f"Expected {expected.__name__} payload in {path}")
        return payload

    def save(self, resource: str, payload: Any) -> None:
        path = self._base_path / resource
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
                handle.flush()
            # Atomic on POSIX; readers never observe a half-written file.
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    def path_for(self, resource: str) -> Path:
        return self._base_path / resource
