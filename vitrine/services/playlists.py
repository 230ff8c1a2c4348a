from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Protocol

import requests

from vitrine.errors import EmptyPlaylistError, PlaylistError, PlaylistFetchError
from vitrine.models import CategoryView, LibraryStats, MediaEntry, PlaylistRecord
from vitrine.services import catalog
from vitrine.services.m3u import build_m3u_plus, parse_m3u
from vitrine.services.storage import PlaylistStore


logger = logging.getLogger(__name__)

PLAYLIST_EXTENSIONS = (".m3u", ".m3u8")


class PlaylistFetcher(Protocol):
    def fetch_text(self, url: str) -> str: ...


class HttpPlaylistFetcher:
    def __init__(self, user_agent: str = "Vitrine/1.0", timeout_s: int = 15, session: requests.Session | None = None):
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def fetch_text(self, url: str) -> str:
        r = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
        r.raise_for_status()
        r.encoding = r.encoding or "utf-8"
        return r.text


def default_playlist_name(now: datetime | None = None) -> str:
    return f"Playlist {(now or datetime.now()).strftime('%d/%m/%Y')}"


class PlaylistService:
    """
    Import boundary and read side used by the screens.

    Parsing, classification and aggregation are pure; the only shared state
    is the store, and every write to it goes through ``_lock``.
    """

    def __init__(self, store: PlaylistStore, fetcher: PlaylistFetcher | None = None):
        self.store = store
        self.fetcher = fetcher
        self._lock = threading.Lock()

    def add_playlist(
        self,
        name: str,
        content: str,
        source_url: str | None = None,
        force_category: str | None = None,
    ) -> PlaylistRecord:
        entries = parse_m3u(content, force_category=force_category)
        if not entries:
            logger.warning("No media entries parsed from playlist %r (%d chars)", name, len(content or ""))
            raise EmptyPlaylistError()

        record = PlaylistRecord(
            name=(name or "").strip() or default_playlist_name(),
            source_url=source_url,
            content=content,
            entries=tuple(entries),
        )

        with self._lock:
            records = self.store.read_all()
            records.append(record)
            self.store.write_all(records)

        logger.info("Imported playlist %r with %d entries", record.name, len(entries))
        return record

    def import_from_url(
        self,
        url: str,
        name: str | None = None,
        force_category: str | None = None,
    ) -> PlaylistRecord:
        if self.fetcher is None:
            raise PlaylistFetchError(url)

        try:
            content = self.fetcher.fetch_text(url)
        except (requests.RequestException, OSError) as e:
            logger.warning("Playlist fetch failed for %s", url, exc_info=True)
            raise PlaylistFetchError(url) from e

        return self.add_playlist(name or "", content, source_url=url, force_category=force_category)

    def import_from_file(
        self,
        path: str | Path,
        name: str | None = None,
        force_category: str | None = None,
    ) -> PlaylistRecord:
        p = Path(path)
        if p.suffix.lower() not in PLAYLIST_EXTENSIONS:
            raise PlaylistError("Please select an M3U or M3U8 file.")

        content = p.read_text(encoding="utf-8-sig", errors="replace")
        return self.add_playlist(name or p.stem, content, force_category=force_category)

    def get_playlists(self) -> list[PlaylistRecord]:
        return self.store.read_all()

    def get_all_categories(self) -> list[CategoryView]:
        return catalog.build_categories(self.store.read_all())

    def get_category(self, name: str) -> CategoryView | None:
        return catalog.find_category(self.get_all_categories(), name)

    def search(self, query: str) -> list[MediaEntry]:
        return catalog.search_entries(self.export_all_entries(), query)

    def stats(self) -> LibraryStats:
        return catalog.library_stats(self.store.read_all())

    def export_all_entries(self) -> list[MediaEntry]:
        return catalog.flatten_entries(self.store.read_all())

    def export_m3u(self) -> str:
        return build_m3u_plus(self.export_all_entries())

    def clear_all_data(self) -> None:
        with self._lock:
            self.store.delete_all()
        logger.info("Cleared all stored playlists")
