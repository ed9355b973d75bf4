"""Alphabetical macro index built from rendered cross-reference markup.

The index is a second pass over the combined HTML rather than over the
parsed records: anchors are discovered with ``ANCHOR_PATTERN`` and the
originating file is recovered from each anchor identifier.
"""

import html
import logging
import re
from typing import Iterable

from macrodoc.generators.template_manager import TemplateManager
from macrodoc.output.html import ANCHOR_PATTERN, ANCHOR_SEPARATOR
from macrodoc.parsers.structure import UNKNOWN_ORIGIN, AnchorEntry

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(name: str) -> list:
    """Sort key that ignores case and orders digit runs numerically.

    ``ITEM2`` sorts before ``ITEM10``.
    """
    parts = _DIGITS_RE.split(name.lower())
    return [int(part) if part.isdigit() else part for part in parts]


def origin_of(anchor: str) -> str:
    """Return the document tag of an anchor, or ``"unknown"``."""
    prefix, separator, suffix = anchor.rpartition(ANCHOR_SEPARATOR)
    if not separator or not prefix or not suffix:
        return UNKNOWN_ORIGIN
    return prefix


class IndexBuilder:
    """Builds the indexed cross-reference page.

    The index maps each macro name to one anchor. When the same name
    appears more than once, the entry scanned last replaces earlier
    ones, including entries from other files.
    """

    def __init__(self, templates: TemplateManager, title: str = "Macro Index") -> None:
        """Initialize the index builder.

        Args:
            templates: Template manager used to render the page.
            title: Title of the index page.
        """
        self.templates = templates
        self.title = title

    def scan_anchors(self, markup: str) -> list[AnchorEntry]:
        """Find every record anchor in rendered markup, in document order.

        Args:
            markup: Combined cross-reference HTML.

        Returns:
            One entry per anchored macro section.
        """
        return [
            AnchorEntry(
                name=html.unescape(match.group(2)).strip(),
                anchor=match.group(1),
                origin=origin_of(match.group(1)),
            )
            for match in ANCHOR_PATTERN.finditer(markup)
        ]

    def build_index(self, entries: Iterable[AnchorEntry]) -> dict[str, AnchorEntry]:
        """Map macro names to anchors, later entries replacing earlier ones.

        Args:
            entries: Anchor entries in scan order.

        Returns:
            Mapping of macro name to the last entry seen for it.
        """
        index: dict[str, AnchorEntry] = {}
        for entry in entries:
            previous = index.get(entry.name)
            if previous is not None:
                logger.info(
                    "Index entry %s from %s replaced by %s",
                    entry.name,
                    previous.origin,
                    entry.origin,
                )
            index[entry.name] = entry
        return index

    def sorted_entries(self, index: dict[str, AnchorEntry]) -> list[AnchorEntry]:
        """Return index entries in case-insensitive natural order."""
        return sorted(index.values(), key=lambda e: (natural_key(e.name), e.name))

    def render(self, markup: str) -> str:
        """Prepend the sorted index to the combined cross-reference markup.

        Args:
            markup: Combined cross-reference HTML.

        Returns:
            The complete indexed HTML page.
        """
        index = self.build_index(self.scan_anchors(markup))
        entries = self.sorted_entries(index)
        logger.debug("Indexed %d macros", len(entries))
        return self.templates.render_index_page(self.title, entries, markup)
