"""Data models for representing parsed macro documentation.

Defines dataclasses for source documents, file headers, documented
macros, parsed files, and index anchors. These models form the shared
vocabulary between the parsers, the renderers, and the index builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

HEADER_FIELDS: tuple[str, ...] = ("Description", "Key Points")

RECORD_FIELDS: tuple[str, ...] = (
    "Parameters",
    "Description",
    "Side effects",
    "Usage",
    "Z80 Equivalent",
    "Notes",
)

NOTES_FIELD = "Notes"
UNKNOWN_ORIGIN = "unknown"


@dataclass(frozen=True)
class SourceDocument:
    """Raw text of one annotated source file.

    Attributes:
        name: Document name (the file name, used for titles and anchors).
        text: Full source text.
        path: Path the text was read from, if any.
    """

    name: str
    text: str
    path: str = ""


@dataclass
class FileHeader:
    """File-level preamble extracted from the leading comment block.

    Attributes:
        fields: Mapping of header labels to their text. Absent labels
            read back as empty strings.
    """

    fields: dict[str, str] = field(default_factory=dict)

    @property
    def description(self) -> str:
        return self.fields.get("Description", "")

    @property
    def key_points(self) -> str:
        return self.fields.get("Key Points", "")

    def is_empty(self) -> bool:
        """Return True when no header field carries text."""
        return not any(self.fields.values())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary with every header label, empty when absent.
        """
        return {label: self.fields.get(label, "") for label in HEADER_FIELDS}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileHeader:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary keyed by header label.

        Returns:
            A new FileHeader instance.
        """
        return cls(fields={k: v for k, v in data.items() if k in HEADER_FIELDS and v})


@dataclass
class MacroRecord:
    """A documented macro and the fields extracted from its comment run.

    Attributes:
        name: Identifier declared by the macro opener.
        fields: Ordered mapping of record labels to text, in the order
            the labels were first seen.
        line_number: Line of the macro opener in the source (1-based).
    """

    name: str
    fields: dict[str, str] = field(default_factory=dict)
    line_number: int = 0

    def get(self, label: str) -> str:
        """Return the text of a field, or an empty string when absent."""
        return self.fields.get(label, "")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this record.
        """
        return {
            "name": self.name,
            "fields": dict(self.fields),
            "line_number": self.line_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MacroRecord:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with record fields.

        Returns:
            A new MacroRecord instance.
        """
        return cls(
            name=data["name"],
            fields=dict(data.get("fields", {})),
            line_number=data.get("line_number", 0),
        )


@dataclass
class MacroFile:
    """The parsed documentation of one source document.

    Attributes:
        name: Document name.
        header: File-level header.
        macros: Records keyed by macro name. Insertion order follows the
            first occurrence of each name; a later macro with the same
            name replaces the earlier record's content.
    """

    name: str
    header: FileHeader = field(default_factory=FileHeader)
    macros: dict[str, MacroRecord] = field(default_factory=dict)

    @property
    def records(self) -> list[MacroRecord]:
        return list(self.macros.values())

    def add_record(self, record: MacroRecord) -> bool:
        """Insert a record, replacing any earlier record with the same name.

        Args:
            record: The record to insert.

        Returns:
            True if an earlier record was replaced.
        """
        replaced = record.name in self.macros
        self.macros[record.name] = record
        return replaced

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this parsed file.
        """
        return {
            "name": self.name,
            "header": self.header.to_dict(),
            "macros": [record.to_dict() for record in self.macros.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MacroFile:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with parsed file fields.

        Returns:
            A new MacroFile instance.
        """
        parsed = cls(
            name=data["name"],
            header=FileHeader.from_dict(data.get("header", {})),
        )
        for item in data.get("macros", []):
            parsed.add_record(MacroRecord.from_dict(item))
        return parsed


@dataclass(frozen=True)
class AnchorEntry:
    """A record anchor discovered in rendered cross-reference markup.

    Attributes:
        name: Record (macro) name.
        anchor: Anchor identifier of the record's block.
        origin: Tag of the document the record came from, or
            ``"unknown"`` when the anchor carries no document prefix.
    """

    name: str
    anchor: str
    origin: str = UNKNOWN_ORIGIN

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this entry.
        """
        return {"name": self.name, "anchor": self.anchor, "origin": self.origin}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnchorEntry:
        """Deserialize from a dictionary.

        Args:
            data: Dictionary with entry fields.

        Returns:
            A new AnchorEntry instance.
        """
        return cls(
            name=data["name"],
            anchor=data["anchor"],
            origin=data.get("origin", UNKNOWN_ORIGIN),
        )
