import json
from pathlib import Path
import textwrap

import pytest
from typer.testing import CliRunner

from bibpress.ui.cli import app


SOURCE = """
@article{ann2020,
    author = {Ann},
    title = {Later Work},
    url = {http://example.org/later},
    year = {2020},
}
@book{bob2019,
    author = {Bob},
    title = {Earlier Work},
    year = {2019},
}
"""


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BIBPRESS_CONFIG", raising=False)
    monkeypatch.delenv("BIBPRESS_FORMATS", raising=False)


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


def test_render_writes_all_documents_next_to_source(tmp_path: Path) -> None:
    source = _write(tmp_path, "refs.bib", SOURCE)

    result = CliRunner().invoke(app, ["render", str(source)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "refs.html").exists()
    assert (tmp_path / "refs.pdf").read_bytes().startswith(b"%PDF-")
    assert (tmp_path / "refs.md").read_text(encoding="utf-8") == (
        "1. Ann [Later Work](http://example.org/later) 2020\n1. Bob [Earlier Work]() 2019"
    )
    assert "Rendered Documents" in result.output


def test_render_honours_output_dir_format_and_sort_flags(tmp_path: Path) -> None:
    source = _write(tmp_path, "refs.bib", SOURCE)
    output_dir = tmp_path / "out"

    result = CliRunner().invoke(
        app,
        [
            "render",
            str(source),
            "--output-dir",
            str(output_dir),
            "--format",
            "md",
            "--sort-all",
            "--sequential",
        ],
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in output_dir.iterdir()) == ["refs.md"]
    markdown = (output_dir / "refs.md").read_text(encoding="utf-8")
    assert markdown.index("Bob") < markdown.index("Ann")


def test_render_rejects_unknown_format(tmp_path: Path) -> None:
    source = _write(tmp_path, "refs.bib", SOURCE)
    result = CliRunner().invoke(app, ["render", str(source), "--format", "docx"])
    assert result.exit_code == 1
    assert not (tmp_path / "refs.html").exists()


def test_render_exits_with_error_on_parse_failure(tmp_path: Path) -> None:
    source = _write(tmp_path, "broken.bib", "@article{broken, title = {Oops}")

    result = CliRunner().invoke(app, ["render", str(source)])

    assert result.exit_code == 1
    assert "Failed to parse bibliography" in result.output
    assert not any(path.suffix in {".html", ".md", ".pdf"} for path in tmp_path.iterdir())


def test_inspect_lists_entries_in_year_order(tmp_path: Path) -> None:
    source = _write(tmp_path, "refs.bib", SOURCE)

    result = CliRunner().invoke(app, ["inspect", str(source)])

    assert result.exit_code == 0, result.output
    assert "bob2019 (book)" in result.output
    assert "ann2020 (article)" in result.output
    assert result.output.index("bob2019") < result.output.index("ann2020")
    assert "Bibliography Summary" in result.output


def test_inspect_reports_duplicate_keys(tmp_path: Path) -> None:
    source = _write(
        tmp_path,
        "dups.bib",
        """
        @misc{dup, title = {First}}
        @misc{dup, title = {Second}}
        """,
    )

    result = CliRunner().invoke(app, ["inspect", str(source)])

    assert result.exit_code == 0, result.output
    assert "Warnings" in result.output
    assert "Second" in result.output
    assert "First" not in result.output


def test_invoke_replays_event_against_local_store(tmp_path: Path) -> None:
    store_root = tmp_path / "store"
    _write(store_root, "bucket/refs.bib", SOURCE)
    event = tmp_path / "event.json"
    event.write_text(
        json.dumps(
            {"Records": [{"s3": {"bucket": {"name": "bucket"}, "object": {"key": "refs.bib"}}}]}
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["invoke", str(event), "--store-root", str(store_root)])

    assert result.exit_code == 0, result.output
    for suffix in ("html", "md", "pdf"):
        assert (store_root / "bucket" / f"refs.{suffix}").exists()
    assert "Invocation Report" in result.output


def test_invoke_fails_when_source_is_missing(tmp_path: Path) -> None:
    event = tmp_path / "event.json"
    event.write_text(
        json.dumps(
            {"Records": [{"s3": {"bucket": {"name": "bucket"}, "object": {"key": "gone.bib"}}}]}
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["invoke", str(event), "--store-root", str(tmp_path)])

    assert result.exit_code == 1
    assert "failed" in result.output


def test_invoke_with_empty_event_exits_with_error(tmp_path: Path) -> None:
    event = tmp_path / "event.json"
    event.write_text("{}", encoding="utf-8")

    result = CliRunner().invoke(app, ["invoke", str(event), "--store-root", str(tmp_path)])

    assert result.exit_code == 1
    assert "No records found" in result.output


def test_verbose_flag_prints_progress(tmp_path: Path) -> None:
    source = _write(tmp_path, "refs.bib", SOURCE)

    result = CliRunner().invoke(app, ["-v", "render", str(source), "--format", "html"])

    assert result.exit_code == 0, result.output
    assert "Parsed 2 entries from refs.bib" in result.output
