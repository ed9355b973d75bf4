"""Template manager for loading and rendering Jinja2 HTML templates.

Provides a centralized interface for rendering the cross-reference
pages from Jinja2 templates stored in the templates/ directory.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape

from macrodoc.parsers.structure import AnchorEntry, MacroFile, MacroRecord

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent.parent / "templates"

MACRO_FILE_TEMPLATE = "macro_file.html.j2"
INDEX_PAGE_TEMPLATE = "index_page.html.j2"


def nl2br(value: Any) -> Markup:
    """Escape text for HTML and turn its newlines into ``<br>`` tags."""
    text = str(value).replace("\r", "")
    return Markup("<br>\n").join(escape(line) for line in text.split("\n"))


class TemplateManager:
    """Loads and renders the Jinja2 templates for cross-reference output.

    Templates are loaded from a configurable directory with HTML
    autoescaping enabled, so every value placed in the markup is escaped.
    """

    def __init__(self, templates_dir: Optional[str] = None) -> None:
        """Initialize the template manager.

        Args:
            templates_dir: Path to the templates directory. Uses the
                default templates/ directory if not specified.
        """
        self._templates_path = (
            Path(templates_dir) if templates_dir else _DEFAULT_TEMPLATES_DIR
        )

        if not self._templates_path.exists():
            logger.warning("Templates directory not found: %s", self._templates_path)

        self._env = Environment(
            loader=FileSystemLoader(str(self._templates_path)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["nl2br"] = nl2br
        logger.debug("Template manager initialized with: %s", self._templates_path)

    def render_macro_file(
        self,
        parsed: MacroFile,
        entries: Sequence[tuple[MacroRecord, str]],
        fields: Sequence[str],
        file_anchor: str,
    ) -> str:
        """Render the cross-reference fragment for one source file.

        Args:
            parsed: The parsed source file.
            entries: Each record paired with its anchor identifier.
            fields: Record labels to show, in display order.
            file_anchor: Anchor identifier of the file itself.

        Returns:
            Rendered HTML fragment.
        """
        return self._render(
            MACRO_FILE_TEMPLATE,
            parsed=parsed,
            entries=entries,
            fields=fields,
            file_anchor=file_anchor,
        )

    def render_index_page(
        self,
        title: str,
        entries: Sequence[AnchorEntry],
        body: str,
    ) -> str:
        """Render the indexed page: link list followed by the body.

        Args:
            title: Page and index title.
            entries: Index entries, already sorted.
            body: Combined cross-reference markup, inserted unescaped.

        Returns:
            Rendered HTML page.
        """
        return self._render(
            INDEX_PAGE_TEMPLATE,
            title=title,
            entries=entries,
            body=Markup(body),
        )

    def _render(self, template_name: str, **kwargs: Any) -> str:
        """Render a template with the given context variables.

        Args:
            template_name: Name of the template file to render.
            **kwargs: Template context variables.

        Returns:
            Rendered template string.

        Raises:
            TemplateNotFound: If the template file does not exist.
        """
        template = self._env.get_template(template_name)
        rendered = template.render(**kwargs)
        logger.debug("Rendered template %s (%d chars)", template_name, len(rendered))
        return rendered
