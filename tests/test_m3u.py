from __future__ import annotations

from vitrine.services.m3u import build_m3u_plus, parse_m3u


def test_text_without_directives_or_urls_yields_nothing() -> None:
    assert parse_m3u("") == []
    assert parse_m3u("#EXTM3U\n# just a comment\n\n   \n") == []
    assert parse_m3u("foo\nbar baz\n") == []


def test_basic_entry_fields() -> None:
    text = '#EXTM3U\n#EXTINF:-1 tvg-name="Channel A",Channel A\nhttp://x/a.m3u8\n'

    entries = parse_m3u(text)

    assert len(entries) == 1
    e = entries[0]
    assert e.duration == -1
    assert e.name == "Channel A"
    assert e.url == "http://x/a.m3u8"
    assert e.tvg_name == "Channel A"


def test_attributes_any_order_and_unknown_keys_ignored() -> None:
    text = (
        '#EXTINF:120.5 foo="bar" tvg-logo="http://l/logo.png" tvg-id="a.br" '
        'group-title="Esportes",Sport One\n'
        "https://s/1.ts\n"
    )

    e = parse_m3u(text)[0]

    assert e.duration == 120.5
    assert e.tvg_id == "a.br"
    assert e.tvg_logo == "http://l/logo.png"
    assert e.tvg_name is None
    assert e.main_category == "TV"
    assert e.sub_category is None


def test_duplicate_attribute_overwrites_earlier_one() -> None:
    text = '#EXTINF:-1 tvg-id="first" tvg-id="second",Name\nhttp://x/1\n'

    assert parse_m3u(text)[0].tvg_id == "second"


def test_missing_duration_is_not_an_error() -> None:
    e = parse_m3u('#EXTINF: tvg-id="x",Something\nhttp://x/1\n')[0]

    assert e.duration is None
    assert e.name == "Something"


def test_name_is_text_after_last_comma() -> None:
    e = parse_m3u('#EXTINF:-1 group-title="A, B",First, Second\nhttp://x/1\n')[0]

    assert e.name == "Second"


def test_name_falls_back_to_tvg_name_then_line_number() -> None:
    text = (
        "#EXTM3U\n"
        '#EXTINF:-1 tvg-name="From Tvg"\n'
        "http://x/1\n"
        "#EXTINF:-1\n"
        "http://x/2\n"
    )

    entries = parse_m3u(text)

    assert [e.name for e in entries] == ["From Tvg", "Canal 4"]


def test_url_without_directive_gets_running_count_name() -> None:
    text = "#EXTINF:-1,Named\nhttp://x/1\nhttp://x/2\nhttps://x/3\n"

    entries = parse_m3u(text)

    assert [e.name for e in entries] == ["Named", "Canal 2", "Canal 3"]
    assert entries[1].main_category == "Other"
    assert entries[1].sub_category is None


def test_non_http_locator_needs_a_pending_directive() -> None:
    text = (
        "rtmp://orphan/stream\n"
        "#EXTINF:-1,Local File\n"
        "media/file.mp4\n"
        "another/orphan.mp4\n"
    )

    entries = parse_m3u(text)

    assert len(entries) == 1
    assert entries[0].name == "Local File"
    assert entries[0].url == "media/file.mp4"


def test_orphan_directive_produces_no_entry() -> None:
    text = "#EXTINF:-1 tvg-id=\"lost\",Lost\n#EXTINF:-1,Kept\nhttp://x/kept\n#EXTINF:-1,Trailing\n"

    entries = parse_m3u(text)

    assert len(entries) == 1
    assert entries[0].name == "Kept"
    assert entries[0].tvg_id is None


def test_comments_between_directive_and_url_are_skipped() -> None:
    text = "#EXTINF:-1,Film\n#EXTVLCOPT:http-user-agent=x\nhttp://x/f.mp4\n"

    entries = parse_m3u(text)

    assert len(entries) == 1
    assert entries[0].url == "http://x/f.mp4"


def test_crlf_and_bom_are_tolerated() -> None:
    text = "\ufeff#EXTM3U\r\n#EXTINF:-1,Channel\r\nhttp://x/c\r\n"

    entries = parse_m3u(text)

    assert len(entries) == 1
    assert entries[0].name == "Channel"
    assert entries[0].url == "http://x/c"


def test_pipe_group_title_is_classified() -> None:
    e = parse_m3u('#EXTINF:-1 group-title="Filmes|Ação",Movie X\nhttp://x/m\n')[0]

    assert e.main_category == "Movies"
    assert e.sub_category == "Ação"


def test_unknown_group_title_is_preserved_as_subcategory() -> None:
    e = parse_m3u('#EXTINF:-1 group-title="Xpto Unknown",Abc 1\nhttp://x/u\n')[0]

    assert e.main_category == "Other"
    assert e.sub_category == "Xpto Unknown"


def test_force_category_applies_to_every_entry() -> None:
    text = (
        '#EXTINF:-1 group-title="Filmes|Ação",Movie X\nhttp://x/1\n'
        '#EXTINF:-1 group-title="Esportes",Sport\nhttp://x/2\n'
        "http://x/3\n"
    )

    entries = parse_m3u(text, force_category="Series")

    assert [e.main_category for e in entries] == ["Series", "Series", "Series"]
    assert [e.sub_category for e in entries] == ["Ação", None, None]


def test_ids_are_unique() -> None:
    text = "\n".join(f"#EXTINF:-1,Ch {i}\nhttp://x/{i}" for i in range(500))

    entries = parse_m3u(text)

    assert len(entries) == 500
    assert len({e.id for e in entries}) == 500


def test_build_m3u_plus_writes_main_and_sub_group() -> None:
    entries = parse_m3u(
        '#EXTINF:-1 tvg-id="a" group-title="Filmes|Ação",Movie X\nhttp://x/m\n'
        "#EXTINF:95,Plain\nhttp://x/p\n"
    )

    text = build_m3u_plus(entries)

    lines = text.splitlines()
    assert lines[0] == "#EXTM3U"
    assert lines[1] == '#EXTINF:-1 tvg-id="a" group-title="Movies|Ação",Movie X'
    assert lines[2] == "http://x/m"
    assert lines[3] == "#EXTINF:95,Plain"

    again = parse_m3u(text)
    assert [(e.main_category, e.sub_category) for e in again] == [("Movies", "Ação"), ("Other", None)]


def test_only_newline_separates_lines() -> None:
    text = "#EXTINF:-1,Foo\u2028Bar\nhttp://x/1\n"

    entries = parse_m3u(text)

    assert len(entries) == 1
    assert entries[0].name == "Foo\u2028Bar"
    assert entries[0].url == "http://x/1"


def test_utf8_name_decoded_as_latin1_stays_one_entry() -> None:
    # the second UTF-8 byte of U+00C5 decodes to "\x85" (NEL) under latin-1
    text = "#EXTINF:-1,\u00c5sa\nhttp://x/1\n".encode("utf-8").decode("latin-1")

    entries = parse_m3u(text)

    assert len(entries) == 1
    assert entries[0].name == "\u00c3\x85sa"
    assert entries[0].url == "http://x/1"


def test_comma_inside_attribute_is_not_a_name_separator() -> None:
    text = (
        '#EXTINF:-1 group-title="A, B"\n'
        "http://x/1\n"
        '#EXTINF:-1 tvg-name="Tvg Name" group-title="A, B"\n'
        "http://x/2\n"
    )

    entries = parse_m3u(text)

    assert [e.name for e in entries] == ["Canal 1", "Tvg Name"]
