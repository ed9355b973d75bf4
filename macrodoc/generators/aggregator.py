"""Multi-file aggregation of macro documentation.

Parses every source document once, renders it in both output formats,
and concatenates the results into the combined table and combined
cross-reference documents.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from macrodoc.output.html import HtmlWriter, normalize, unique_prefix
from macrodoc.output.markdown import MarkdownWriter
from macrodoc.parsers.asm_parser import AsmParser
from macrodoc.parsers.structure import MacroFile, SourceDocument

logger = logging.getLogger(__name__)


@dataclass
class AggregateResult:
    """Everything produced by one aggregation pass.

    Attributes:
        pages: Every parsed document paired with its Markdown page, in
            input order, including the excluded document.
        included: Parsed documents that went into the combined outputs.
        combined_table: Combined Markdown table document.
        combined_xref: Combined cross-reference HTML.
    """

    pages: list[tuple[MacroFile, str]] = field(default_factory=list)
    included: list[MacroFile] = field(default_factory=list)
    combined_table: str = ""
    combined_xref: str = ""

    @property
    def macro_count(self) -> int:
        return sum(len(parsed.macros) for parsed in self.included)


class Aggregator:
    """Runs the parsers and both renderers over a list of documents.

    One document name may be excluded: it still gets its own page but
    never appears in the combined outputs.
    """

    def __init__(
        self,
        parser: Optional[AsmParser] = None,
        markdown: Optional[MarkdownWriter] = None,
        html: Optional[HtmlWriter] = None,
        exclude: Optional[str] = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            parser: Source parser. Defaults to an AsmParser.
            markdown: Table renderer. Defaults to a MarkdownWriter.
            html: Cross-reference renderer. Defaults to an HtmlWriter.
            exclude: Self-referential document to leave out of the
                combined outputs. Only its file name is compared, so a
                path such as "lib/macros.asm" matches "macros.asm".
        """
        self.parser = parser or AsmParser()
        self.markdown = markdown or MarkdownWriter()
        self.html = html or HtmlWriter()
        self.exclude = exclude

    def aggregate(self, documents: Sequence[SourceDocument]) -> AggregateResult:
        """Parse and render every document, then combine the outputs.

        Args:
            documents: Source documents in processing order.

        Returns:
            The per-file pages and the two combined documents.
        """
        result = AggregateResult()
        tables: list[str] = []
        fragments: list[str] = []
        tags: set[str] = set()
        excluded = Path(self.exclude).name if self.exclude else None

        for document in documents:
            parsed = self.parser.parse_document(document)
            page = self.markdown.render_file(parsed)
            result.pages.append((parsed, page))

            if excluded and document.name == excluded:
                logger.info("Leaving %s out of the combined documentation", document.name)
                continue

            tag = unique_prefix(document.name, tags)
            if tag != normalize(document.name):
                logger.info("Anchors of %s use tag %s to stay unique", document.name, tag)

            result.included.append(parsed)
            tables.append(page)
            fragments.append(self.html.render_file(parsed, prefix=tag))

        result.combined_table = self.markdown.combine(tables)
        result.combined_xref = self.html.combine(fragments)

        logger.info(
            "Aggregated %d of %d documents (%d macros)",
            len(result.included),
            len(documents),
            result.macro_count,
        )
        return result
