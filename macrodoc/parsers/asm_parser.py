"""Assembler macro library parser.

Extracts the file header and the documented macros from annotated
assembler sources. A documented macro is a run of full-line comments
immediately followed by a ``MACRO <name>`` ... ``ENDM`` block.
"""

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from macrodoc.parsers.fields import (
    FieldExtractor,
    clean_comment_lines,
    is_comment_line,
)
from macrodoc.parsers.structure import (
    HEADER_FIELDS,
    NOTES_FIELD,
    RECORD_FIELDS,
    FileHeader,
    MacroFile,
    MacroRecord,
    SourceDocument,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADER_STOP_KEYWORDS = ("MACRO", "IFNDEF", "DEFINE")


class _ScanState(Enum):
    SEEKING_COMMENTS = "seeking-comments"
    IN_COMMENTS = "in-comments"
    IN_BLOCK = "in-block"


class AsmParser:
    """Parses annotated assembler sources into MacroFile structures.

    The header is the comment block before the first structural keyword.
    Macros are found with a line-scanning state machine so that blocks
    without a closer are skipped rather than matched greedily.
    """

    def __init__(
        self,
        comment_prefix: str = ";",
        header_stop_keywords: Sequence[str] = DEFAULT_HEADER_STOP_KEYWORDS,
        block_opener: str = "MACRO",
        block_closer: str = "ENDM",
    ) -> None:
        """Initialize the parser.

        Args:
            comment_prefix: Marker that starts a full-line comment.
            header_stop_keywords: Keywords that end the header scan.
            block_opener: Keyword that opens a named block.
            block_closer: Keyword that closes a named block.
        """
        self.comment_prefix = comment_prefix
        keywords = "|".join(re.escape(k) for k in header_stop_keywords)
        self._stop_re = re.compile(rf"^\s*(?:{keywords})\b", re.IGNORECASE)
        self._opener_re = re.compile(
            rf"^\s*{re.escape(block_opener)}\s+([A-Za-z0-9_]+)", re.IGNORECASE
        )
        self._closer_re = re.compile(
            rf"^\s*{re.escape(block_closer)}\b", re.IGNORECASE
        )
        self._header_fields = FieldExtractor(HEADER_FIELDS)
        self._record_fields = FieldExtractor(
            [label for label in RECORD_FIELDS if label != NOTES_FIELD],
            notes_field=NOTES_FIELD,
            skip_signature=True,
        )

    def parse_file(self, file_path: str, encoding: str = "utf-8") -> MacroFile:
        """Read and parse an annotated source file.

        Args:
            file_path: Path to the source file.
            encoding: Text encoding of the file.

        Returns:
            The parsed MacroFile, named after the file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        text = path.read_text(encoding=encoding)
        return self.parse_document(SourceDocument(name=path.name, text=text, path=str(path)))

    def parse_document(self, document: SourceDocument) -> MacroFile:
        """Parse an in-memory source document.

        Args:
            document: The document to parse.

        Returns:
            A MacroFile holding the header and the documented macros.
        """
        lines = document.text.splitlines()
        parsed = MacroFile(
            name=document.name,
            header=self.parse_header(lines),
        )

        for record in self.parse_records(lines):
            if parsed.add_record(record):
                logger.warning(
                    "%s: macro %s documented more than once, keeping the one at line %d",
                    document.name,
                    record.name,
                    record.line_number,
                )

        logger.debug(
            "Parsed %s: %d header fields, %d macros",
            document.name,
            sum(1 for value in parsed.header.fields.values() if value),
            len(parsed.macros),
        )
        return parsed

    def parse_header(self, lines: Sequence[str]) -> FileHeader:
        """Extract the Description and Key Points of the file header.

        Args:
            lines: Source lines of the document.

        Returns:
            The FileHeader; absent fields read back as empty strings.
        """
        comments = []
        for line in lines:
            if self._stop_re.match(line):
                break
            if is_comment_line(line, self.comment_prefix):
                comments.append(line)

        texts = clean_comment_lines(comments, self.comment_prefix)
        return FileHeader(fields=self._header_fields.extract(texts))

    def parse_records(self, lines: Sequence[str]) -> list[MacroRecord]:
        """Find every documented macro block in source order.

        Blank lines inside or after a comment run keep it open; any other
        line that is neither a comment nor a block opener discards it.
        Blocks with no comment run, runs without any recognised label, and
        blocks never closed yield nothing.

        Args:
            lines: Source lines of the document.

        Returns:
            Records in the order their blocks appear, duplicates included.
        """
        records: list[MacroRecord] = []
        state = _ScanState.SEEKING_COMMENTS
        run: list[str] = []
        pending: Optional[MacroRecord] = None
        opened_at = 0

        for number, line in enumerate(lines, start=1):
            if state is _ScanState.IN_BLOCK:
                if self._closer_re.match(line):
                    if pending is not None:
                        records.append(pending)
                    pending = None
                    state = _ScanState.SEEKING_COMMENTS
                continue

            opener = self._opener_re.match(line)
            if opener:
                if state is _ScanState.IN_COMMENTS:
                    pending = self._build_record(opener.group(1), run, number)
                else:
                    pending = None
                run = []
                opened_at = number
                state = _ScanState.IN_BLOCK
            elif is_comment_line(line, self.comment_prefix):
                run.append(line)
                state = _ScanState.IN_COMMENTS
            elif line.strip() and state is _ScanState.IN_COMMENTS:
                run = []
                state = _ScanState.SEEKING_COMMENTS

        if state is _ScanState.IN_BLOCK:
            logger.debug("Skipping unterminated block opened at line %d", opened_at)

        return records

    def _build_record(
        self, name: str, run: list[str], line_number: int
    ) -> Optional[MacroRecord]:
        texts = clean_comment_lines(run, self.comment_prefix)
        fields = self._record_fields.extract(texts, record_name=name)
        if not any(label != NOTES_FIELD for label in fields):
            logger.debug("Skipping macro %s: no recognised documentation labels", name)
            return None
        return MacroRecord(name=name, fields=fields, line_number=line_number)
