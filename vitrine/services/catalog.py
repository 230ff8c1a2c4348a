from __future__ import annotations

import unicodedata
from typing import Iterable

from vitrine.models import (
    GENERAL_SUBCATEGORY,
    UNCATEGORIZED,
    CategoryView,
    LibraryStats,
    MediaEntry,
    PlaylistRecord,
    SubcategoryView,
)


def sort_key(text: str) -> str:
    """Accent- and case-insensitive key, so "Ação" sorts next to "Acao"."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def flatten_entries(records: Iterable[PlaylistRecord]) -> list[MediaEntry]:
    return [e for r in records for e in r.entries]


def build_categories(records: Iterable[PlaylistRecord]) -> list[CategoryView]:
    """
    Rebuild the category -> subcategory -> entries tree from every record.

    Nothing is cached; each call scans all entries again. Sorting is stable,
    so entries with the same name keep the order they were imported in.
    """
    grouped: dict[str, list[MediaEntry]] = {}
    for e in flatten_entries(records):
        grouped.setdefault(e.main_category or UNCATEGORIZED, []).append(e)

    categories: list[CategoryView] = []
    for main, items in grouped.items():
        items = sorted(items, key=lambda e: sort_key(e.name))
        subs: dict[str, list[MediaEntry]] = {}
        for e in items:
            subs.setdefault(e.sub_category or GENERAL_SUBCATEGORY, []).append(e)

        view = CategoryView(name=main, entries=items)
        for sub_name in sorted(subs, key=lambda s: (sort_key(s), s)):
            view.subcategories[sub_name] = SubcategoryView(name=sub_name, entries=subs[sub_name])
        categories.append(view)

    return sorted(categories, key=lambda c: (sort_key(c.name), c.name))


def find_category(categories: Iterable[CategoryView], name: str) -> CategoryView | None:
    for c in categories:
        if c.name == name:
            return c
    return None


def search_entries(entries: Iterable[MediaEntry], query: str) -> list[MediaEntry]:
    q = sort_key((query or "").strip())
    if not q:
        return []

    out: list[MediaEntry] = []
    for e in entries:
        fields = (e.name, e.main_category, e.sub_category or "")
        if any(q in sort_key(f) for f in fields):
            out.append(e)
    return out


def library_stats(records: list[PlaylistRecord]) -> LibraryStats:
    categories = build_categories(records)
    return LibraryStats(
        playlists=len(records),
        categories=len(categories),
        entries=sum(c.count for c in categories),
    )
