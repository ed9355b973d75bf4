"""Tests for the alphabetical index builder."""

import logging

import pytest

from macrodoc.generators.template_manager import TemplateManager
from macrodoc.output.html import HtmlWriter
from macrodoc.output.index import IndexBuilder, natural_key, origin_of
from macrodoc.parsers.structure import AnchorEntry, MacroFile, MacroRecord


@pytest.fixture
def templates() -> TemplateManager:
    """Create a TemplateManager with the default templates directory."""
    return TemplateManager()


@pytest.fixture
def builder(templates: TemplateManager) -> IndexBuilder:
    """Create an IndexBuilder."""
    return IndexBuilder(templates, title="Macro Index")


def _file(name: str, *macros: str) -> MacroFile:
    parsed = MacroFile(name=name)
    for macro in macros:
        parsed.add_record(MacroRecord(name=macro, fields={"Usage": f"{macro} in {name}"}))
    return parsed


def _combined(templates: TemplateManager, *files: MacroFile) -> str:
    writer = HtmlWriter(templates)
    return writer.combine([writer.render_file(parsed) for parsed in files])


class TestHelpers:
    """Tests for sorting and origin helpers."""

    def test_natural_order(self) -> None:
        names = ["ITEM10", "item2", "Item1", "BETA"]
        assert sorted(names, key=natural_key) == ["BETA", "Item1", "item2", "ITEM10"]

    def test_natural_key_mixed_prefix(self) -> None:
        names = ["2X", "X2", "10X"]
        assert sorted(names, key=natural_key) == ["2X", "10X", "X2"]

    def test_origin_of(self) -> None:
        assert origin_of("load_asm-LD_HL_A") == "load_asm"

    def test_origin_unknown(self) -> None:
        assert origin_of("noseparator") == "unknown"
        assert origin_of("-FOO") == "unknown"


class TestScanAnchors:
    """Tests for anchor discovery in rendered markup."""

    def test_scan_order(self, builder: IndexBuilder, templates: TemplateManager) -> None:
        markup = _combined(templates, _file("a.asm", "ZED", "ALPHA"), _file("b.asm", "MID"))
        entries = builder.scan_anchors(markup)
        assert [e.name for e in entries] == ["ZED", "ALPHA", "MID"]
        assert entries[0] == AnchorEntry(name="ZED", anchor="a_asm-ZED", origin="a_asm")
        assert entries[2].origin == "b_asm"

    def test_unknown_origin_for_bare_anchor(self, builder: IndexBuilder) -> None:
        markup = '<section class="macro" id="LONELY">\n  <h3 class="macro-name">LONELY</h3>'
        assert builder.scan_anchors(markup) == [
            AnchorEntry(name="LONELY", anchor="LONELY", origin="unknown")
        ]

    def test_names_unescaped(self, builder: IndexBuilder) -> None:
        markup = '<section class="macro" id="d-A_B">\n<h3 class="macro-name">A&amp;B</h3>'
        assert builder.scan_anchors(markup)[0].name == "A&B"

    def test_no_anchors(self, builder: IndexBuilder) -> None:
        assert builder.scan_anchors("<p>nothing here</p>") == []


class TestBuildIndex:
    """Tests for index construction."""

    def test_last_write_wins_across_files(
        self,
        builder: IndexBuilder,
        templates: TemplateManager,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        markup = _combined(templates, _file("first.asm", "FOO"), _file("second.asm", "FOO"))
        with caplog.at_level(logging.INFO, logger="macrodoc"):
            index = builder.build_index(builder.scan_anchors(markup))
        assert list(index) == ["FOO"]
        assert index["FOO"].anchor == "second_asm-FOO"
        assert index["FOO"].origin == "second_asm"
        assert "replaced" in caplog.text

    def test_sorted_entries(self, builder: IndexBuilder) -> None:
        entries = [
            AnchorEntry(name=name, anchor=f"d-{name}", origin="d")
            for name in ("ITEM10", "ITEM2", "apple", "Banana")
        ]
        index = builder.build_index(entries)
        assert [e.name for e in builder.sorted_entries(index)] == [
            "apple",
            "Banana",
            "ITEM2",
            "ITEM10",
        ]


class TestRender:
    """Tests for the final indexed page."""

    def test_index_precedes_body(self, builder: IndexBuilder, templates: TemplateManager) -> None:
        markup = _combined(templates, _file("a.asm", "ITEM10", "ITEM2"))
        page = builder.render(markup)
        assert page.startswith("<!DOCTYPE html>")
        assert "<title>Macro Index</title>" in page
        assert page.index('href="#a_asm-ITEM2"') < page.index('href="#a_asm-ITEM10"')
        assert page.index('href="#a_asm-ITEM10"') < page.index('id="a_asm-ITEM10"')

    def test_body_included_unescaped(
        self, builder: IndexBuilder, templates: TemplateManager
    ) -> None:
        markup = _combined(templates, _file("a.asm", "FOO"))
        page = builder.render(markup)
        assert markup in page

    def test_duplicate_has_single_link(
        self, builder: IndexBuilder, templates: TemplateManager
    ) -> None:
        markup = _combined(templates, _file("first.asm", "FOO"), _file("second.asm", "FOO"))
        page = builder.render(markup)
        assert page.count('href="#') == 1
        assert 'href="#second_asm-FOO"' in page

    def test_rescan_of_page_is_stable(
        self, builder: IndexBuilder, templates: TemplateManager
    ) -> None:
        markup = _combined(templates, _file("a.asm", "ONE", "TWO"))
        page = builder.render(markup)
        assert builder.scan_anchors(page) == builder.scan_anchors(markup)
