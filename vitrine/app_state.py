from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from vitrine.models import MediaEntry


Listener = Callable[[MediaEntry | None], None]


class NowPlaying:
    """Currently selected stream; the player screen subscribes to changes."""

    def __init__(self):
        self._current: MediaEntry | None = None
        self._listeners: list[Listener] = []

    @property
    def current(self) -> MediaEntry | None:
        return self._current

    def set(self, entry: MediaEntry | None) -> None:
        self._current = entry
        for listener in list(self._listeners):
            listener(entry)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


@dataclass
class AppState:
    current_category: str | None = None
    current_subcategory: str | None = None
    search_query: str = ""
    now_playing: NowPlaying = field(default_factory=NowPlaying)
