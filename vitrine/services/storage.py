from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from vitrine.models import PlaylistRecord


DEFAULT_STORE_KEY = "playlists"
DEFAULT_STATE_FILENAME = "vitrine_state.json"


class PlaylistStore(Protocol):
    def read_all(self) -> list[PlaylistRecord]: ...

    def write_all(self, records: list[PlaylistRecord]) -> None: ...

    def delete_all(self) -> None: ...


class JsonPlaylistStore:
    """
    Keeps the playlist collection in the app's JSON state file.

    The state file is a small key/value document; playlists live under one
    key so other app state can share the file. Read and write errors
    (missing permissions, a corrupt document) are raised to the caller.
    """

    def __init__(
        self,
        base_dir: str | Path,
        key: str = DEFAULT_STORE_KEY,
        filename: str = DEFAULT_STATE_FILENAME,
    ):
        self.base_dir = Path(base_dir)
        self.key = key
        self.filename = filename

    def _state_path(self) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir / self.filename

    def _load_state(self) -> dict:
        p = self._state_path()
        if not p.exists():
            return {}
        return json.loads(p.read_text(encoding="utf-8"))

    def _save_state(self, state: dict) -> None:
        p = self._state_path()
        p.write_text(json.dumps(state, ensure_ascii=False), encoding="utf-8")

    def read_all(self) -> list[PlaylistRecord]:
        raw = self._load_state().get(self.key) or []
        return [PlaylistRecord.from_dict(item) for item in raw]

    def write_all(self, records: list[PlaylistRecord]) -> None:
        state = self._load_state()
        state[self.key] = [r.to_dict() for r in records]
        self._save_state(state)

    def delete_all(self) -> None:
        state = self._load_state()
        if self.key not in state:
            return
        del state[self.key]
        self._save_state(state)


class MemoryPlaylistStore:
    def __init__(self, records: list[PlaylistRecord] | None = None):
        self._records: list[PlaylistRecord] = list(records or [])

    def read_all(self) -> list[PlaylistRecord]:
        return list(self._records)

    def write_all(self, records: list[PlaylistRecord]) -> None:
        self._records = list(records)

    def delete_all(self) -> None:
        self._records = []
