"""Save stores for game sessions.

The game treats persistence as an opaque key -> blob store. Two stores are
provided:

- ``FileSaveStore``: one JSON file per key under a data directory.
- ``MemorySaveStore``: a dict, for tests and throwaway servers.

Both speak ``SessionState`` and raise PersistenceUnavailableError when the
medium fails and CorruptSaveError when a blob cannot be decoded. Callers
recover from either by starting a new game.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import orjson

from ecosim.exceptions import CorruptSaveError, PersistenceUnavailableError
from ecosim.serializers import SessionState

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class SaveStore(Protocol):
    """What the server needs from a persistence collaborator."""

    def save(self, key: str, state: SessionState) -> None: ...

    def load(self, key: str) -> SessionState: ...

    def delete(self, key: str) -> bool: ...

    def list_keys(self) -> List[str]: ...


def validate_key(key: str) -> str:
    """Reject keys that could escape the save directory.

    Raises:
        ValueError: If the key contains anything but letters, digits, ``_`` or ``-``
    """
    if not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid save key: {key!r}")
    return key


def encode_state(state: SessionState) -> bytes:
    blob = state.to_dict()
    blob["savedAt"] = datetime.now(timezone.utc).isoformat()
    return orjson.dumps(blob, option=orjson.OPT_INDENT_2)


def decode_state(raw: Union[bytes, str]) -> SessionState:
    """Decode a stored blob.

    Raises:
        CorruptSaveError: If the blob is not valid JSON or not a session
    """
    try:
        data: Any = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise CorruptSaveError(f"Save is not valid JSON: {e}") from e
    return SessionState.from_dict(data)


class FileSaveStore:
    """Stores each session as ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: Union[str, Path]) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{validate_key(key)}.json"

    def save(self, key: str, state: SessionState) -> None:
        path = self._path(key)
        payload = encode_state(state)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_bytes(payload)
            tmp_path.replace(path)
        except OSError as e:
            logger.error(f"Failed to save {key}: {e}", exc_info=True)
            raise PersistenceUnavailableError(f"Could not write save {key!r}: {e}") from e
        logger.info(f"Saved session {key} (day {state.current_day}, {len(state.organisms)} organisms)")

    def load(self, key: str) -> SessionState:
        path = self._path(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise PersistenceUnavailableError(f"No save named {key!r}") from e
        except OSError as e:
            logger.error(f"Failed to read {key}: {e}", exc_info=True)
            raise PersistenceUnavailableError(f"Could not read save {key!r}: {e}") from e

        try:
            state = decode_state(raw)
        except CorruptSaveError:
            logger.warning(f"Save {key} is corrupt")
            raise
        logger.info(f"Loaded session {key} (day {state.current_day})")
        return state

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceUnavailableError(f"Could not delete save {key!r}: {e}") from e
        return True

    def list_keys(self) -> List[str]:
        if not self.data_dir.exists():
            return []
        return sorted(p.stem for p in self.data_dir.glob("*.json"))


class MemorySaveStore:
    """Keeps encoded blobs in a dict; same failure modes as the file store."""

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    def save(self, key: str, state: SessionState) -> None:
        self._blobs[validate_key(key)] = encode_state(state)

    def load(self, key: str) -> SessionState:
        raw: Optional[bytes] = self._blobs.get(validate_key(key))
        if raw is None:
            raise PersistenceUnavailableError(f"No save named {key!r}")
        return decode_state(raw)

    def delete(self, key: str) -> bool:
        return self._blobs.pop(validate_key(key), None) is not None

    def list_keys(self) -> List[str]:
        return sorted(self._blobs)
