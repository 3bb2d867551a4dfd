import pymupdf

from bibpress.core.bibliography import BibliographyEntry, EntryProjection
from bibpress.core.rendering import render_pdf
from bibpress.core.rendering.pdf import Run, paragraph_runs


def _entry(key: str, **fields: str) -> BibliographyEntry:
    return BibliographyEntry(key=key, fields=fields)


def _words(payload: bytes) -> list[str]:
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        return [word[4] for page in document for word in page.get_text("words")]


def test_paragraph_runs_layout() -> None:
    runs = paragraph_runs(3, EntryProjection("Ann", "Title", "http://x", "2020"))
    assert runs == [Run("3. Ann "), Run("Title", uri="http://x"), Run(" 2020")]
    assert [run.is_link for run in runs] == [False, True, False]


def test_render_pdf_numbers_entries_in_given_order() -> None:
    payload = render_pdf(
        [
            _entry("a", author="Ann", title="First Title", url="http://a.example", year="2020"),
            _entry("b", author="Bob", title="Second Title", year="2019"),
        ]
    )

    assert payload.startswith(b"%PDF-")
    words = _words(payload)
    assert words[:2] == ["1.", "Ann"]
    assert words.index("2.") < words.index("Bob") < words.index("Second")
    assert words.index("First") < words.index("Second")
    assert words[-1] == "2019"


def test_render_pdf_links_titles_to_urls() -> None:
    payload = render_pdf([_entry("a", author="Ann", title="Linked", url="http://x")])
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        uris = [link.get("uri") for page in document for link in page.get_links()]
    assert uris == ["http://x"]


def test_render_pdf_flows_onto_new_pages() -> None:
    entries = [_entry(f"k{index}", author="Author", title="Title") for index in range(120)]
    payload = render_pdf(entries)
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        assert document.page_count > 1
        last_words = [word[4] for word in document[-1].get_text("words")]
    assert last_words[-3:] == ["120.", "Author", "Title"]


def test_render_pdf_wraps_long_titles_within_margins() -> None:
    title = " ".join(["word"] * 80)
    payload = render_pdf([_entry("a", author="Ann", title=title, url="http://x")])
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        page = document[0]
        for _x0, _y0, x1, _y1, *_rest in page.get_text("words"):
            assert x1 <= page.rect.width


def test_render_pdf_empty_database_is_single_blank_page() -> None:
    payload = render_pdf([])
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        assert document.page_count == 1
        assert document[0].get_text().strip() == ""


def test_render_pdf_is_deterministic() -> None:
    entries = [_entry("a", author="Ann", title="T", url="http://x", year="2020")]
    assert render_pdf(entries) == render_pdf(entries)


def test_render_pdf_keeps_link_for_entry_without_url() -> None:
    payload = render_pdf(
        [
            _entry("a", author="First", title="One", url="http://one.example"),
            _entry("b", author="Second", title="Two"),
        ]
    )
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        page = document[0]
        links = sorted(page.get_links(), key=lambda link: link["from"].y0)
        two = next(word for word in page.get_text("words") if word[4] == "Two")

    assert [link["kind"] for link in links] == [pymupdf.LINK_URI, pymupdf.LINK_URI]
    assert links[0]["uri"] == "http://one.example"
    assert not links[1].get("uri")
    assert links[1]["from"].intersects(pymupdf.Rect(two[:4]))


def test_render_pdf_reads_back_non_latin_text() -> None:
    payload = render_pdf([_entry("a", author="Łukasz Żółć 東京", title="Ünïcode")])
    words = _words(payload)
    assert words == ["1.", "Łukasz", "Żółć", "東京", "Ünïcode"]


def test_render_pdf_uses_one_link_per_wrapped_title_line() -> None:
    title = " ".join(["word"] * 80)
    payload = render_pdf([_entry("a", author="Ann", title=title, url="http://x")])
    with pymupdf.open(stream=payload, filetype="pdf") as document:
        page = document[0]
        links = page.get_links()
        title_lines = {round(word[3]) for word in page.get_text("words") if word[4] == "word"}

    assert len(title_lines) > 1
    assert len(links) == len(title_lines)
    assert {link["uri"] for link in links} == {"http://x"}
