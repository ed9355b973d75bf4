"""Markdown output generation for macro documentation.

Renders one parsed source file as a Markdown page with the file header
sections and a single table holding one row per documented macro.
"""

import logging
from pathlib import Path

from macrodoc.parsers.structure import RECORD_FIELDS, MacroFile

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ("Macro name",) + RECORD_FIELDS

FILE_SEPARATOR = "\n---\n\n"


def escape_cell(text: str) -> str:
    """Make text safe to place inside a Markdown table cell.

    Args:
        text: Raw cell text.

    Returns:
        Text with carriage returns removed, pipes escaped and newlines
        turned into ``<br>`` markers.
    """
    text = text.replace("\r", "").strip()
    text = text.replace("|", "\\|")
    return text.replace("\n", "<br>")


def markdown_filename(document_name: str) -> str:
    """Return the output file name for a source document.

    ``8-bit-maths.macros.asm`` becomes ``8-bit-maths.macros.md``.
    """
    return Path(document_name).with_suffix(".md").name


class MarkdownWriter:
    """Writes macro documentation as Markdown tables.

    Each source file gets its own page: a title, the optional
    Description and Key Points sections, and one table with a fixed
    column for every record field.
    """

    def __init__(self, output_dir: str = "docs/generated") -> None:
        """Initialize the Markdown writer.

        Args:
            output_dir: Directory where per-file Markdown pages are written.
        """
        self.output_dir = Path(output_dir)

    def render_file(self, parsed: MacroFile) -> str:
        """Render a parsed source file as a Markdown page.

        Args:
            parsed: The parsed source file.

        Returns:
            Markdown string for the file.
        """
        lines: list[str] = [f"# {parsed.name}\n"]

        if parsed.header.description:
            lines.append("## Description\n")
            lines.append(f"{parsed.header.description}\n")

        if parsed.header.key_points:
            lines.append("## Key Points\n")
            lines.append(f"{parsed.header.key_points}\n")

        lines.append("| " + " | ".join(TABLE_COLUMNS) + " |")
        lines.append("|" + "|".join("-" * (len(col) + 2) for col in TABLE_COLUMNS) + "|")

        for record in parsed.records:
            cells = [record.name] + [record.get(label) for label in RECORD_FIELDS]
            lines.append("| " + " | ".join(escape_cell(cell) for cell in cells) + " |")

        lines.append("")
        return "\n".join(lines)

    def combine(self, rendered: list[str]) -> str:
        """Concatenate rendered pages, in order, with a rule between files.

        Args:
            rendered: Markdown pages as returned by :meth:`render_file`.

        Returns:
            The combined Markdown document.
        """
        return FILE_SEPARATOR.join(rendered)

    def write_file_doc(self, parsed: MacroFile, content: str) -> Path:
        """Write a rendered page for a single source file.

        Args:
            parsed: The parsed source file the page was rendered from.
            content: The rendered Markdown.

        Returns:
            Path to the written Markdown file.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        md_path = self.output_dir / markdown_filename(parsed.name)
        md_path.write_text(content, encoding="utf-8")

        logger.info("Wrote file documentation: %s", md_path)
        return md_path
