from __future__ import annotations

from dataclasses import dataclass

from vitrine.models import MAIN_MOVIES, MAIN_OTHER, MAIN_SERIES, MAIN_TV


# Substring keywords, Portuguese and English. Groups are tested in this order.
_MOVIE_KEYWORDS = (
    "filme", "movie", "cinema", "film", "longa", "longa-metragem",
    "documentario", "documentário", "documentary", "documentaries",
    "acao", "ação", "action", "comedia", "comédia", "comedy", "drama",
    "terror", "horror", "suspense", "thriller", "animacao", "animação",
    "animation", "aventura", "adventure", "romance", "ficcao", "ficção",
    "sci-fi", "fantasy", "fantasia",
)

_SERIES_KEYWORDS = (
    "série", "serie", "seriado", "temporada", "season", "episódio",
    "episodio", "episode", "novela", "telenovela", "soap opera", "tv show",
    "show", "miniserie", "minissérie", "minisserie", "sitcom", "anime",
    "desenho", "cartoon", "reality", "talk show",
)

_TV_KEYWORDS = (
    "tv", "canal", "canais", "channel", "televisão", "televisao",
    "television", "live", "ao vivo", "iptv", "news", "notícia", "noticia",
    "jornalismo", "esporte", "sport", "futebol", "football", "música",
    "musica", "music", "infantil", "kids", "criança", "crianca", "children",
    "religioso", "religious", "gospel", "cultura", "cultural", "educativo",
    "educational", "variedades", "variety", "entretenimento",
    "entertainment", "culinaria", "culinária", "cooking", "lifestyle",
    "nacional", "internacional", "regional", "local", "aberto", "fechado",
    "premium", "hd", "4k", "globo", "sbt", "record", "band", "rede tv",
)

_KEYWORD_GROUPS = (
    (MAIN_MOVIES, _MOVIE_KEYWORDS),
    (MAIN_SERIES, _SERIES_KEYWORDS),
    (MAIN_TV, _TV_KEYWORDS),
)


@dataclass(frozen=True)
class Classification:
    main: str
    sub: str | None = None


def normalize_main_category(label: str) -> str:
    """Map free text onto TV / Movies / Series, or Other when nothing matches."""
    text = (label or "").lower()
    if not text:
        return MAIN_OTHER
    for main, keywords in _KEYWORD_GROUPS:
        if any(k in text for k in keywords):
            return main
    return MAIN_OTHER


def split_group_title(group_title: str) -> list[str]:
    return [seg.strip() for seg in (group_title or "").split("|") if seg.strip()]


def classify(
    group_title: str,
    force_category: str | None = None,
    name: str | None = None,
) -> Classification:
    """
    Classify a raw ``group-title`` into a main category and optional subcategory.

    ``"Filmes|Ação"`` gives ``Movies`` / ``Ação``. A single label is normalized;
    when it lands on ``Other`` the label itself is kept as the subcategory.
    ``force_category`` replaces the main category but keeps the subcategory.
    Without an override, an ``Other`` result gets one more try against the
    display ``name``.
    """
    segments = split_group_title(group_title)

    if len(segments) >= 2:
        result = Classification(main=normalize_main_category(segments[0]), sub=segments[1])
    elif segments:
        label = segments[0]
        main = normalize_main_category(label)
        result = Classification(main=main, sub=label if main == MAIN_OTHER else None)
    else:
        result = Classification(main=MAIN_OTHER)

    forced = (force_category or "").strip()
    if forced:
        return Classification(main=forced, sub=result.sub)

    if result.main == MAIN_OTHER and name:
        guessed = normalize_main_category(name)
        if guessed != MAIN_OTHER:
            return Classification(main=guessed, sub=result.sub)

    return result
