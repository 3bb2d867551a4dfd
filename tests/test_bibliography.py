import logging
import textwrap

import pytest

from bibpress.core.bibliography import (
    MISSING_YEAR,
    BibliographyDatabase,
    BibliographyEntry,
    decode_source,
    filter_characters,
    parse_database,
    project_entry,
)
from bibpress.core.exceptions import ParseError


def _bib(payload: str) -> bytes:
    return (textwrap.dedent(payload).strip() + "\n").encode("utf-8")


def test_filter_characters_drops_controls_and_keeps_whitespace() -> None:
    text = "a\x00b\x07c\td\ne\rf\x7fg\x85h\ufeffi\ufffdj"
    assert filter_characters(text) == "abc\td\ne\rfghij"


def test_filter_characters_keeps_non_ascii_text() -> None:
    assert filter_characters("Gödel, Escher, Bach : 漢字") == "Gödel, Escher, Bach : 漢字"


def test_decode_source_drops_invalid_utf8_and_bom() -> None:
    payload = b"\xef\xbb\xbf@misc{k, title = {A\xffB}}"
    assert decode_source(payload) == "@misc{k, title = {AB}}"


def test_parse_database_reads_literal_field_values() -> None:
    database = parse_database(
        _bib(
            """
            @article{smith2020,
                author = {Smith, John and Doe, Jane},
                title = {An {Important} Study},
                journal = "Journal of Testing",
                url = {http://example.org/paper},
                year = 2020,
            }
            """
        ),
        source_name="library.bib",
    )

    assert len(database) == 1
    entry = database.find("smith2020")
    assert entry is not None
    assert entry.entry_type == "article"
    assert entry.author == "Smith, John and Doe, Jane"
    assert entry.title == "An {Important} Study"
    assert entry.get("journal") == "Journal of Testing"
    assert entry.url == "http://example.org/paper"
    assert entry.year == "2020"
    assert database.source_name == "library.bib"
    assert not database.issues


def test_parse_database_expands_macros_and_concatenation() -> None:
    database = parse_database(
        _bib(
            """
            @string{conf = "Conference on Parsing"}
            @inproceedings{k, booktitle = conf # " 2021", month = jan}
            """
        )
    )
    entry = database.find("k")
    assert entry is not None
    assert entry.get("booktitle") == "Conference on Parsing 2021"
    assert entry.get("month") == "January"


def test_parse_database_keeps_parse_order() -> None:
    database = parse_database(
        _bib(
            """
            @misc{third, year = 2003}
            @misc{first, year = 2001}
            @misc{second, year = 2002}
            """
        )
    )
    assert database.keys() == ["third", "first", "second"]


def test_parse_database_preserves_unknown_types_and_fields() -> None:
    database = parse_database(_bib("@dataset{d1, Repository = {zenodo}, Custom-Field = {x}}"))
    entry = database.find("D1")
    assert entry is not None
    assert entry.entry_type == "dataset"
    assert entry.get("repository") == "zenodo"
    assert entry.get("CUSTOM-FIELD") == "x"


def test_parse_database_leaves_crossref_unresolved() -> None:
    database = parse_database(
        _bib(
            """
            @inproceedings{child, title = {Child}, crossref = {parent}}
            @proceedings{parent, title = {Parent}, year = 1999}
            """
        )
    )
    child = database.find("child")
    assert child is not None
    assert child.get("crossref") == "parent"
    assert not child.has_field("year")


def test_parse_database_accepts_empty_input() -> None:
    database = parse_database(b"")
    assert len(database) == 0
    assert not database


def test_parse_database_tolerates_control_characters() -> None:
    database = parse_database(b"@misc{k,\x00 title = {Ti\x1ftle}}")
    entry = database.find("k")
    assert entry is not None
    assert entry.title == "Title"


def test_parse_database_rejects_unbalanced_braces() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_database(_bib("@article{broken, title = {Oops}"), source_name="broken.bib")
    assert "broken.bib" in str(excinfo.value)


def test_parse_database_rejects_missing_key() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_database(_bib("@article{, title = {No key}}"))
    assert excinfo.value.line == 1


def test_parse_database_duplicate_keys_last_definition_wins(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="bibpress"):
        database = parse_database(
            _bib(
                """
                @misc{dup, title = {First}}
                @misc{other, title = {Other}}
                @book{dup, title = {Second}}
                """
            ),
            source_name="dups.bib",
        )

    assert database.keys() == ["other", "dup"]
    entry = database.find("dup")
    assert entry is not None
    assert entry.title == "Second"
    assert entry.entry_type == "book"
    assert [issue.key for issue in database.issues] == ["dup"]
    assert database.issues[0].source == "dups.bib"
    assert any("Duplicate entry key" in record.message for record in caplog.records)


def test_parse_database_duplicate_field_keeps_first_value() -> None:
    database = parse_database(_bib("@misc{k, title = {One}, TITLE = {Two}}"))
    entry = database.find("k")
    assert entry is not None
    assert entry.title == "One"
    assert len(database.issues) == 1
    assert database.issues[0].key == "k"


def test_parse_database_undefined_macro_is_reported() -> None:
    database = parse_database(_bib("@misc{k, title = {Kept}, journal = nosuchmacro}"))
    entry = database.find("k")
    assert entry is not None
    assert entry.title == "Kept"
    assert any("nosuchmacro" in issue.message for issue in database.issues)


def test_entry_accessors_default_to_empty_strings() -> None:
    entry = BibliographyEntry(key="bare")
    assert entry.author == ""
    assert entry.title == ""
    assert entry.url == ""
    assert entry.year == MISSING_YEAR
    assert project_entry(entry) == ("", "", "", MISSING_YEAR)
    assert project_entry(entry, missing_year="") == ("", "", "", "")


def test_entry_is_immutable() -> None:
    entry = BibliographyEntry(key="k", entry_type="Article", fields={"Title": "T"})
    assert entry.entry_type == "article"
    assert entry.get("title") == "T"
    with pytest.raises(TypeError):
        entry.fields["title"] = "changed"  # type: ignore[index]


def test_database_lookup_is_case_insensitive() -> None:
    database = BibliographyDatabase([BibliographyEntry(key="MixedCase")])
    assert database.find("mixedcase") is database.entries[0]
    assert database.find("missing") is None
