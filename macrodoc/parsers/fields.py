"""Field extraction for annotated comment blocks.

Turns the lines of a comment block into an ordered mapping of labelled
fields (``Description:``, ``Parameters:`` and so on). Also provides the
helpers for stripping comment markers, recognising decorative divider
lines, and writing a field mapping back out as a comment block.
"""

import logging
import re
import textwrap
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

_DIVIDER_RE = re.compile(r"^[-=]{5,}$")

# An upper-case identifier optionally followed by parameter names,
# e.g. "MIN_UNSIGNED_A_VAL val" or "ADD_ADDR_REG addr, reg".
_SIGNATURE_RE = re.compile(
    r"^[A-Z][A-Z0-9_]*(?:\s+[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)?$"
)

# Any identifier optionally followed by parameter names.
_CALL_SHAPE_RE = re.compile(
    r"^(\w+)(?:\s+[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)?$"
)


def is_comment_line(line: str, prefix: str = ";") -> bool:
    """Return True if the line is a full-line comment."""
    return line.lstrip().startswith(prefix)


def is_divider(text: str) -> bool:
    """Return True for decorative lines made of five or more '=' or '-'."""
    return bool(_DIVIDER_RE.match(text.strip()))


def strip_comment_marker(line: str, prefix: str = ";") -> str:
    """Remove the comment marker and at most one following whitespace character.

    Args:
        line: A raw source line.
        prefix: The comment marker.

    Returns:
        The comment text with trailing whitespace removed.
    """
    text = line.strip()
    if text.startswith(prefix):
        text = text[len(prefix) :]
        if text[:1].isspace():
            text = text[1:]
    return text.rstrip()


def clean_comment_lines(lines: Iterable[str], prefix: str = ";") -> list[str]:
    """Strip comment markers from a run of lines and drop divider lines.

    Args:
        lines: Raw comment lines.
        prefix: The comment marker.

    Returns:
        The comment texts, in order, without decorative dividers.
    """
    cleaned = []
    for line in lines:
        text = strip_comment_marker(line, prefix)
        if is_divider(text):
            continue
        cleaned.append(text)
    return cleaned


def _join_value(buffer: list[str]) -> str:
    first = buffer[0].strip()
    rest = textwrap.dedent("\n".join(buffer[1:]))
    return f"{first}\n{rest}".strip()


def _is_signature(text: str, record_name: Optional[str]) -> bool:
    if record_name is None:
        return bool(_SIGNATURE_RE.match(text))
    match = _CALL_SHAPE_RE.match(text)
    return bool(match) and match.group(1).lower() == record_name.lower()


class FieldExtractor:
    """Extracts labelled fields from the lines of a comment block.

    A line of the form ``<Label>: text`` starts a new field; following
    lines are appended to it until the next label. Labels match
    case-insensitively and are stored under their canonical spelling.

    Args:
        labels: The recognised field labels for this call site.
        notes_field: Field that collects text seen before any label.
            When None, such text is dropped.
        skip_signature: Skip the first unlabelled line that is a macro
            signature (identifier plus optional parameter names). When
            the record name is passed to :meth:`extract`, the identifier
            must be that name, in any case; otherwise it must be an
            upper-case identifier.
    """

    def __init__(
        self,
        labels: Iterable[str],
        notes_field: Optional[str] = None,
        skip_signature: bool = False,
    ) -> None:
        self.labels = tuple(labels)
        self.notes_field = notes_field
        self.skip_signature = skip_signature
        self._canonical = {label.lower(): label for label in self.labels}
        alternatives = "|".join(
            re.escape(label) for label in sorted(self.labels, key=len, reverse=True)
        )
        self._label_re = re.compile(rf"^({alternatives}):\s*(.*)$", re.IGNORECASE)

    def extract(
        self, lines: Iterable[str], record_name: Optional[str] = None
    ) -> dict[str, str]:
        """Build the field mapping for a block of comment texts.

        Args:
            lines: Comment texts with markers already stripped.
            record_name: Name of the record the block documents, used to
                recognise its signature line.

        Returns:
            Mapping of label to trimmed text, in first-seen label order.
            The notes field, when populated, comes last.
        """
        fields: dict[str, str] = {}
        notes: list[str] = []
        current: Optional[str] = None
        buffer: list[str] = []
        signature_pending = self.skip_signature

        for line in lines:
            if is_divider(line):
                continue

            match = self._label_re.match(line)
            if match:
                if current is not None:
                    fields[current] = _join_value(buffer)
                current = self._canonical[match.group(1).lower()]
                buffer = [match.group(2)]
            elif current is not None:
                buffer.append(line)
            elif signature_pending and _is_signature(line.strip(), record_name):
                signature_pending = False
            elif self.notes_field is not None:
                notes.append(line)

        if current is not None:
            fields[current] = _join_value(buffer)

        notes_text = textwrap.dedent("\n".join(notes)).strip()
        if notes_text and self.notes_field is not None:
            fields[self.notes_field] = notes_text

        return fields


def format_fields(
    fields: dict[str, str],
    prefix: str = ";",
    signature: Optional[str] = None,
    notes_field: Optional[str] = None,
) -> list[str]:
    """Write a field mapping back out as comment lines.

    The output is the normalised form of the block: feeding it through
    :func:`clean_comment_lines` and :meth:`FieldExtractor.extract` with
    the same vocabulary yields the same fields.

    Args:
        fields: Mapping of label to text.
        prefix: The comment marker to emit.
        signature: Optional signature line written first.
        notes_field: Field written as unlabelled text before the labels.

    Returns:
        The comment lines, without trailing newlines.
    """

    def comment(text: str) -> str:
        return f"{prefix} {text}" if text else prefix

    lines = []
    if signature:
        lines.append(comment(signature))

    if notes_field and fields.get(notes_field):
        lines.extend(comment(text) for text in fields[notes_field].split("\n"))

    for label, value in fields.items():
        if label == notes_field:
            continue
        if "\n" in value:
            lines.append(comment(f"{label}:"))
            lines.extend(comment(text) for text in value.split("\n"))
        else:
            lines.append(comment(f"{label}: {value}".rstrip()))

    return lines
