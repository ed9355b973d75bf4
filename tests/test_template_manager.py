"""Tests for the Jinja2 template manager."""

import pytest
from jinja2 import TemplateNotFound

from macrodoc.generators.template_manager import TemplateManager, nl2br
from macrodoc.parsers.structure import (
    RECORD_FIELDS,
    AnchorEntry,
    FileHeader,
    MacroFile,
    MacroRecord,
)


@pytest.fixture
def manager() -> TemplateManager:
    """Create a TemplateManager with the default templates directory."""
    return TemplateManager()


class TestTemplateManagerInit:
    """Tests for TemplateManager initialization."""

    def test_default_templates_dir(self) -> None:
        manager = TemplateManager()
        assert manager._templates_path.exists()

    def test_custom_templates_dir(self, tmp_path) -> None:
        (tmp_path / "test.j2").write_text("Hello {{ name }}")
        manager = TemplateManager(templates_dir=str(tmp_path))
        assert manager._templates_path == tmp_path
        assert manager._render("test.j2", name="<b>") == "Hello &lt;b&gt;"

    def test_missing_template(self, tmp_path) -> None:
        manager = TemplateManager(templates_dir=str(tmp_path))
        with pytest.raises(TemplateNotFound):
            manager.render_index_page("Title", [], "")


class TestNl2br:
    """Tests for the nl2br filter."""

    def test_escapes_and_breaks(self) -> None:
        assert str(nl2br("a < b\nc")) == "a &lt; b<br>\nc"

    def test_strips_carriage_returns(self) -> None:
        assert str(nl2br("a\r\nb")) == "a<br>\nb"


class TestMacroFileTemplate:
    """Tests for the per-file fragment template."""

    def test_renders_sections(self, manager: TemplateManager) -> None:
        parsed = MacroFile(
            name="x.asm",
            header=FileHeader(fields={"Description": "About x."}),
        )
        record = MacroRecord(name="FOO", fields={"Usage": "FOO"})
        parsed.add_record(record)
        html = manager.render_macro_file(
            parsed, [(record, "x_asm-FOO")], RECORD_FIELDS, file_anchor="x_asm"
        )
        assert '<article class="macro-file" id="x_asm">' in html
        assert '<section class="macro" id="x_asm-FOO">' in html
        assert "<dd>FOO</dd>" in html
        assert "About x." in html
        assert "Key Points" not in html


class TestIndexPageTemplate:
    """Tests for the index page template."""

    def test_renders_links(self, manager: TemplateManager) -> None:
        entries = [AnchorEntry(name="FOO", anchor="x_asm-FOO", origin="x_asm")]
        html = manager.render_index_page("Macros & More", entries, "<p>body</p>")
        assert "<title>Macros &amp; More</title>" in html
        assert '<a href="#x_asm-FOO">FOO</a>' in html
        assert '<span class="macro-origin">x_asm</span>' in html
        assert "<p>body</p>" in html
