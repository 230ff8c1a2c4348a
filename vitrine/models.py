from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from dateutil import parser as dtparser


MAIN_TV = "TV"
MAIN_MOVIES = "Movies"
MAIN_SERIES = "Series"
MAIN_OTHER = "Other"

MAIN_CATEGORIES = (MAIN_TV, MAIN_MOVIES, MAIN_SERIES, MAIN_OTHER)

UNCATEGORIZED = "Sem categoria"
GENERAL_SUBCATEGORY = "Geral"


@dataclass(frozen=True)
class MediaEntry:
    id: str
    name: str
    url: str
    main_category: str = MAIN_OTHER
    sub_category: str | None = None
    tvg_id: str | None = None
    tvg_name: str | None = None
    tvg_logo: str | None = None
    duration: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "main_category": self.main_category,
            "sub_category": self.sub_category,
            "tvg_id": self.tvg_id,
            "tvg_name": self.tvg_name,
            "tvg_logo": self.tvg_logo,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MediaEntry:
        duration = data.get("duration")
        return cls(
            id=data["id"],
            name=data["name"],
            url=data["url"],
            main_category=data.get("main_category") or MAIN_OTHER,
            sub_category=data.get("sub_category"),
            tvg_id=data.get("tvg_id"),
            tvg_name=data.get("tvg_name"),
            tvg_logo=data.get("tvg_logo"),
            duration=float(duration) if duration is not None else None,
        )


@dataclass(frozen=True)
class PlaylistRecord:
    name: str
    content: str
    entries: tuple[MediaEntry, ...]
    created_at: datetime = field(default_factory=datetime.now)
    source_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source_url": self.source_url,
            "content": self.content,
            "entries": [e.to_dict() for e in self.entries],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlaylistRecord:
        return cls(
            name=data["name"],
            source_url=data.get("source_url"),
            content=data.get("content", ""),
            entries=tuple(MediaEntry.from_dict(e) for e in data.get("entries", [])),
            created_at=dtparser.isoparse(data["created_at"]),
        )


@dataclass
class SubcategoryView:
    name: str
    entries: list[MediaEntry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.entries)


@dataclass
class CategoryView:
    name: str
    entries: list[MediaEntry] = field(default_factory=list)
    subcategories: dict[str, SubcategoryView] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class LibraryStats:
    playlists: int
    categories: int
    entries: int
