from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, replace

from vitrine.models import MAIN_OTHER, MediaEntry
from vitrine.services.classifier import classify


EXTINF_PREFIX = "#EXTINF:"
_URL_PREFIXES = ("http://", "https://")

_DURATION_RE = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)")
_ATTR_RE = re.compile(r"([\w-]+)=\"([^\"]*)\"")

_KNOWN_ATTRS = {
    "tvg-id": "tvg_id",
    "tvg-name": "tvg_name",
    "tvg-logo": "tvg_logo",
    "group-title": "group_title",
}


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class EntryBuilder:
    """Attributes collected from one #EXTINF line, waiting for their locator."""

    name: str | None = None
    main_category: str = MAIN_OTHER
    sub_category: str | None = None
    tvg_id: str | None = None
    tvg_name: str | None = None
    tvg_logo: str | None = None
    duration: float | None = None

    def build(self, url: str) -> MediaEntry:
        return MediaEntry(
            id=_new_id(),
            name=self.name or "",
            url=url,
            main_category=self.main_category,
            sub_category=self.sub_category,
            tvg_id=self.tvg_id,
            tvg_name=self.tvg_name,
            tvg_logo=self.tvg_logo,
            duration=self.duration,
        )


def _display_name(body: str) -> str:
    # commas inside key="..." values are not separators
    masked = _ATTR_RE.sub(lambda m: " " * len(m.group(0)), body)
    idx = masked.rfind(",")
    if idx < 0:
        return ""
    return body[idx + 1:].strip()


def parse_extinf(line: str, line_no: int, force_category: str | None = None) -> EntryBuilder:
    body = line[len(EXTINF_PREFIX):]

    duration = None
    m = _DURATION_RE.match(body)
    if m:
        duration = float(m.group(1))

    attrs: dict[str, str] = {}
    for key, value in _ATTR_RE.findall(body):
        field_name = _KNOWN_ATTRS.get(key)
        if field_name and value:
            attrs[field_name] = value
        elif field_name:
            attrs.pop(field_name, None)

    tvg_name = attrs.get("tvg_name")
    name = _display_name(body)
    classify_name: str | None = name or tvg_name
    if not name:
        name = tvg_name or f"Canal {line_no}"

    cls = classify(attrs.get("group_title", ""), force_category, name=classify_name)

    return EntryBuilder(
        name=name,
        main_category=cls.main,
        sub_category=cls.sub,
        tvg_id=attrs.get("tvg_id"),
        tvg_name=tvg_name,
        tvg_logo=attrs.get("tvg_logo"),
        duration=duration,
    )


def parse_m3u(content: str, force_category: str | None = None) -> list[MediaEntry]:
    """
    Parse M3U/M3U8 playlist text into media entries.

    Malformed lines never raise: a directive without a following locator
    yields nothing, a locator without a directive is either named
    ``Canal N`` (http/https) or dropped (anything else).
    """
    lines = [ln.strip().strip("\ufeff").strip() for ln in (content or "").split("\n")]
    lines = [ln for ln in lines if ln]
    entries: list[MediaEntry] = []

    pending: EntryBuilder | None = None

    for line_no, ln in enumerate(lines, start=1):
        if ln.startswith(EXTINF_PREFIX):
            pending = parse_extinf(ln, line_no, force_category)
            continue

        if ln.startswith("#"):
            continue

        if ln.startswith(_URL_PREFIXES):
            builder = pending
            if builder is None:
                cls = classify("", force_category)
                builder = EntryBuilder(main_category=cls.main, sub_category=cls.sub)
            if not builder.name:
                builder = replace(builder, name=builder.tvg_name or f"Canal {len(entries) + 1}")
            entries.append(builder.build(ln))
            pending = None
            continue

        if pending is not None and pending.name:
            entries.append(pending.build(ln))
            pending = None

    return entries


def build_m3u_plus(entries: list[MediaEntry]) -> str:
    out: list[str] = ["#EXTM3U"]
    for e in entries:
        attrs: list[str] = []
        if e.tvg_id:
            attrs.append(f'tvg-id="{e.tvg_id}"')
        if e.tvg_name:
            attrs.append(f'tvg-name="{e.tvg_name}"')
        if e.tvg_logo:
            attrs.append(f'tvg-logo="{e.tvg_logo}"')
        if e.sub_category:
            attrs.append(f'group-title="{e.main_category}|{e.sub_category}"')
        elif e.main_category != MAIN_OTHER:
            attrs.append(f'group-title="{e.main_category}"')

        duration = e.duration if e.duration is not None else -1
        if float(duration).is_integer():
            duration = int(duration)
        head = " ".join([str(duration), *attrs])
        out.append(f"#EXTINF:{head},{e.name}")
        out.append(e.url)

    return "\n".join(out) + "\n"
