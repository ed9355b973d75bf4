"""Macro Documentation Generator.

Parses annotated assembler macro libraries, extracts the documentation
written in their comment blocks, and renders per-file Markdown tables
plus a cross-referenced HTML reference with an alphabetical index.
"""

__version__ = "0.1.0"
