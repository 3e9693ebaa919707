"""Tests for the CLI module: arg parsing, exit codes, end-to-end reports."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from codemorph.cli import build_parser, main, parse_highlight_arg
from codemorph.highlights import HighlightKind, HighlightRange


@pytest.fixture
def pair(tmp_path: Path) -> tuple[Path, Path]:
    old = tmp_path / "old.js"
    new = tmp_path / "new.js"
    old.write_text("const a = 1;\n")
    new.write_text("const a = 1;\nconst b = 2;\n")
    return old, new


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_highlight(self) -> None:
        assert parse_highlight_arg("3:7") == HighlightRange(3, 7)

    def test_highlight_kind(self) -> None:
        assert parse_highlight_arg("0:1:new") == HighlightRange(0, 1, HighlightKind.NEW)

    def test_highlight_invalid_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_highlight_arg("nope")


class TestArgParsing:
    def test_positionals(self) -> None:
        ns = build_parser().parse_args(["a.js", "b.js"])
        assert ns.old == "a.js"
        assert ns.new == "b.js"
        assert ns.format == "text"
        assert not ns.static
        assert ns.highlight == []

    def test_flags(self) -> None:
        args = ["a", "b", "-l", "css", "--highlight", "0:2", "--highlight", "4:5"]
        args += ["--manual-only", "--static", "--at", "250", "--format", "html"]
        args += ["--watch", "--debug", "-v"]
        ns = build_parser().parse_args(args)
        assert ns.language == "css"
        assert ns.highlight == ["0:2", "4:5"]
        assert ns.manual_only
        assert ns.static
        assert ns.at == 250.0
        assert ns.format == "html"
        assert ns.watch and ns.debug and ns.verbose

    def test_timing_overrides(self) -> None:
        ns = build_parser().parse_args(["a", "b", "--stagger", "20", "--adding", "900"])
        assert ns.stagger == 20.0
        assert ns.adding == 900.0
        assert ns.positioning is None


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, pair, capsys) -> None:
        old, new = pair
        assert main([str(old), str(new)]) == 0
        out = capsys.readouterr().out
        assert "language: javascript" in out

    def test_missing_file_returns_1(self, tmp_path: Path, capsys) -> None:
        missing = tmp_path / "missing.js"
        assert main([str(missing), str(missing)]) == 1
        assert "error:" in capsys.readouterr().err

    def test_bad_highlight_returns_2(self, pair, capsys) -> None:
        old, new = pair
        assert main([str(old), str(new), "--highlight", "x:y"]) == 2
        assert "invalid highlight" in capsys.readouterr().err

    def test_bad_config_returns_2(self, pair, capsys) -> None:
        old, new = pair
        (new.parent / "codemorph.toml").write_text("[timings]\nbogus = 1\n")
        assert main([str(old), str(new)]) == 2
        assert "unknown setting" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# End-to-end reports
# ---------------------------------------------------------------------------


class TestReports:
    def test_text_report(self, pair, tmp_path: Path) -> None:
        old, new = pair
        out = tmp_path / "report.txt"
        assert main([str(old), str(new), "-o", str(out)]) == 0
        text = out.read_text()
        assert "tokens: 9 unchanged, 9 added, 0 removed" in text
        assert "total duration:" in text
        assert "Adding new code elements one by one..." in text
        assert "'const'" in text

    def test_static_report(self, pair, tmp_path: Path) -> None:
        old, new = pair
        out = tmp_path / "report.txt"
        assert main([str(old), str(new), "--static", "-o", str(out)]) == 0
        text = out.read_text()
        assert "static display (no animation)" in text
        assert "0 added" in text

    def test_html_output(self, pair, tmp_path: Path) -> None:
        old, new = pair
        out = tmp_path / "out.html"
        assert main([str(old), str(new), "--format", "html", "-o", str(out)]) == 0
        html = out.read_text()
        assert html.startswith('<pre class="codemorph">')
        assert "token-added" in html
        assert '<span class="line-number">2</span>' in html

    def test_html_frame(self, pair, tmp_path: Path) -> None:
        old, new = pair
        out = tmp_path / "out.html"
        args = [str(old), str(new), "--format", "html", "--at", "0", "-o", str(out)]
        assert main(args) == 0
        html = out.read_text()
        assert "token-added" not in html
        assert "token-unchanged" in html

    def test_incompatible_is_static(self, tmp_path: Path, capsys) -> None:
        old = tmp_path / "old.html"
        new = tmp_path / "new.js"
        old.write_text("<div>hi</div>")
        new.write_text("const x = 1;")
        assert main([str(old), str(new)]) == 0
        assert "static display (no animation)" in capsys.readouterr().out

    def test_debug_dumps_to_stderr(self, pair, capsys) -> None:
        old, new = pair
        assert main([str(old), str(new), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "-- previous tokens" in err
        assert "-- diff" in err
