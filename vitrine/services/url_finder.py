from __future__ import annotations

import re


_URL_RE = re.compile(r"https?://[^\s\]\)\}\>\"']+", re.IGNORECASE)
_TRAILING_PUNCT = ".,;:!?"


def extract_urls(text: str) -> list[str]:
    urls: list[str] = []
    for m in _URL_RE.finditer(text or ""):
        u = m.group(0).rstrip(_TRAILING_PUNCT)
        if u and u not in urls:
            urls.append(u)
    return urls


def first_url(text: str) -> str | None:
    """First http(s) link in pasted text, e.g. a provider message with the list link."""
    urls = extract_urls(text)
    return urls[0] if urls else None
