"""HTML cross-reference output for macro documentation.

Renders parsed source files as linkable HTML fragments in which every
documented macro sits in its own anchored section. The anchor markup is
the contract the index builder relies on when it re-scans the output:

    <section class="macro" id="ANCHOR">
      <h3 class="macro-name">NAME</h3>

``ANCHOR_PATTERN`` matches exactly that markup.
"""

import logging
import re
from typing import Optional

from macrodoc.generators.template_manager import TemplateManager
from macrodoc.parsers.structure import RECORD_FIELDS, MacroFile

logger = logging.getLogger(__name__)

ANCHOR_SEPARATOR = "-"

ANCHOR_PATTERN = re.compile(
    r'<section class="macro" id="([^"]*)">\s*<h3 class="macro-name">(.*?)</h3>',
    re.DOTALL,
)

FILE_SEPARATOR = '\n<hr class="file-separator">\n'

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_]+")


def normalize(text: str) -> str:
    """Reduce text to an anchor-safe token.

    Every run of characters outside ``[A-Za-z0-9_]`` becomes a single
    underscore, so the result never contains the anchor separator.
    """
    return _UNSAFE_RE.sub("_", text) or "_"


def anchor_id(document_name: str, record_name: str, prefix: Optional[str] = None) -> str:
    """Build the anchor identifier of a record within a document.

    Args:
        document_name: Name of the document holding the record.
        record_name: The record identifier.
        prefix: Document tag to use instead of ``normalize(document_name)``,
            as handed out by :func:`unique_prefix`.
    """
    tag = prefix or normalize(document_name)
    return f"{tag}{ANCHOR_SEPARATOR}{normalize(record_name)}"


def unique_prefix(document_name: str, taken: set[str]) -> str:
    """Return a document tag not already in ``taken``, and claim it.

    Names that normalise alike (``a-b.asm`` and ``a.b.asm``) keep distinct
    tags: the first keeps the plain form and later ones get ``_2``, ``_3``
    and so on, in processing order.

    Args:
        document_name: Name of the document.
        taken: Tags already handed out in this run. Updated in place.

    Returns:
        The document tag.
    """
    base = normalize(document_name)
    tag = base
    counter = 2
    while tag in taken:
        tag = f"{base}_{counter}"
        counter += 1
    taken.add(tag)
    return tag


class HtmlWriter:
    """Renders macro documentation as cross-referenced HTML.

    Each file becomes an ``<article>`` with its header sections and a
    list of anchored ``<section>`` blocks, one per macro.
    """

    def __init__(self, templates: Optional[TemplateManager] = None) -> None:
        """Initialize the HTML writer.

        Args:
            templates: Template manager to render with. A default one
                is created when not given.
        """
        self.templates = templates or TemplateManager()

    def render_file(self, parsed: MacroFile, prefix: Optional[str] = None) -> str:
        """Render a parsed source file as an HTML fragment.

        Args:
            parsed: The parsed source file.
            prefix: Document tag for the file's anchors. Defaults to the
                normalised file name.

        Returns:
            HTML fragment with one anchored section per macro.
        """
        tag = prefix or normalize(parsed.name)
        entries = [(record, anchor_id(parsed.name, record.name, tag)) for record in parsed.records]
        return self.templates.render_macro_file(
            parsed,
            entries,
            RECORD_FIELDS,
            file_anchor=tag,
        )

    def combine(self, rendered: list[str]) -> str:
        """Concatenate rendered fragments, in order, with a rule between files.

        Args:
            rendered: HTML fragments as returned by :meth:`render_file`.

        Returns:
            The combined cross-reference markup.
        """
        return FILE_SEPARATOR.join(rendered)
