"""Batch documentation build.

Reads every input document, aggregates and indexes the documentation,
and only then writes the per-file pages, the combined table and the
indexed cross-reference page. A read failure aborts the run before
anything is written.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from macrodoc.generators.aggregator import Aggregator
from macrodoc.generators.template_manager import TemplateManager
from macrodoc.output.html import HtmlWriter
from macrodoc.output.index import IndexBuilder
from macrodoc.output.markdown import MarkdownWriter
from macrodoc.parsers.asm_parser import AsmParser
from macrodoc.parsers.structure import SourceDocument
from macrodoc.utils.config import AppConfig

logger = logging.getLogger(__name__)


def collect_documents(input_dir: str, pattern: str = "*.asm") -> list[Path]:
    """List the source files of a directory in a stable order.

    Args:
        input_dir: Directory to scan (not recursive).
        pattern: Glob pattern for source files.

    Returns:
        Matching file paths sorted by name.

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    root = Path(input_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    return sorted((p for p in root.glob(pattern) if p.is_file()), key=lambda p: p.name)


def read_documents(paths: Sequence[Path], encoding: str = "utf-8") -> list[SourceDocument]:
    """Read every source file into memory.

    Args:
        paths: Files to read, in processing order.
        encoding: Text encoding of the files.

    Returns:
        One SourceDocument per path.

    Raises:
        OSError: If any file cannot be read.
        UnicodeDecodeError: If any file is not valid text.
    """
    documents = []
    for path in paths:
        text = Path(path).read_text(encoding=encoding)
        documents.append(SourceDocument(name=Path(path).name, text=text, path=str(path)))
    return documents


@dataclass
class BuildResult:
    """Summary of a completed build.

    Attributes:
        file_pages: Paths of the per-file Markdown pages.
        combined_table: Path of the combined Markdown table document.
        index_page: Path of the indexed cross-reference page.
        document_count: Number of documents in the combined outputs.
        macro_count: Number of macros in the combined outputs.
    """

    file_pages: list[Path] = field(default_factory=list)
    combined_table: Path = Path()
    index_page: Path = Path()
    document_count: int = 0
    macro_count: int = 0


class DocumentationBuilder:
    """Wires the parser, renderers, aggregator and index builder together.

    All settings come from an AppConfig.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize the builder.

        Args:
            config: Application configuration.
        """
        self.config = config
        templates = TemplateManager()
        parser = AsmParser(
            comment_prefix=config.parser.comment_prefix,
            header_stop_keywords=config.parser.header_stop_keywords,
            block_opener=config.parser.block_opener,
            block_closer=config.parser.block_closer,
        )
        self.markdown = MarkdownWriter(output_dir=config.output.output_dir)
        self.aggregator = Aggregator(
            parser=parser,
            markdown=self.markdown,
            html=HtmlWriter(templates),
            exclude=config.source.exclude,
        )
        self.index = IndexBuilder(templates, title=config.output.index_title)

    def build(self, paths: Sequence[Path]) -> BuildResult:
        """Run the full batch pass over the given files.

        Args:
            paths: Source files in processing order.

        Returns:
            Paths of everything written plus summary counts.

        Raises:
            OSError: If any input cannot be read; nothing is written.
        """
        documents = read_documents(paths, encoding=self.config.source.encoding)
        aggregate = self.aggregator.aggregate(documents)
        indexed = self.index.render(aggregate.combined_xref)

        result = BuildResult(
            document_count=len(aggregate.included),
            macro_count=aggregate.macro_count,
        )
        for parsed, page in aggregate.pages:
            result.file_pages.append(self.markdown.write_file_doc(parsed, page))

        result.combined_table = _write(self.config.output.combined_table, aggregate.combined_table)
        result.index_page = _write(self.config.output.index_file, indexed)
        return result

    def build_directory(self) -> BuildResult:
        """Build documentation for every matching file of the input directory."""
        paths = collect_documents(self.config.source.input_dir, self.config.source.pattern)
        logger.info("Found %d source files in %s", len(paths), self.config.source.input_dir)
        return self.build(paths)


def _write(path: str, content: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", target)
    return target
