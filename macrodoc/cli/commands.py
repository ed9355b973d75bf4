"""CLI commands for the macro documentation generator.

Provides the Click-based command group 'macrodoc' with subcommands for
building the full documentation set and for inspecting how a single
source file is parsed.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional

import click
import yaml

from macrodoc import __version__
from macrodoc.generators.builder import DocumentationBuilder, collect_documents
from macrodoc.parsers.asm_parser import AsmParser
from macrodoc.parsers.fields import format_fields
from macrodoc.parsers.structure import NOTES_FIELD
from macrodoc.utils.config import AppConfig, load_config
from macrodoc.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _parser_from_config(config: AppConfig) -> AsmParser:
    return AsmParser(
        comment_prefix=config.parser.comment_prefix,
        header_stop_keywords=config.parser.header_stop_keywords,
        block_opener=config.parser.block_opener,
        block_closer=config.parser.block_closer,
    )


@click.group()
@click.version_option(version=__version__, prog_name="macrodoc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a YAML config file.",
)
@click.pass_context
def macrodoc(ctx: click.Context, config_path: Optional[str]) -> None:
    """Macro Documentation Generator: reference docs from annotated macro sources."""
    config = load_config(config_path)
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
    )
    ctx.obj = config


@macrodoc.command()
@click.argument("input_dir", type=click.Path(file_okay=False), required=False)
@click.option("--exclude", default=None, help="Source file name left out of the combined output.")
@click.option("--output-dir", type=click.Path(), default=None, help="Per-file page directory.")
@click.option("--combined-table", type=click.Path(), default=None, help="Combined table file.")
@click.option("--index-file", type=click.Path(), default=None, help="Indexed HTML file.")
@click.pass_obj
def build(
    config: AppConfig,
    input_dir: Optional[str],
    exclude: Optional[str],
    output_dir: Optional[str],
    combined_table: Optional[str],
    index_file: Optional[str],
) -> None:
    """Generate the per-file tables, the combined table and the index.

    Every matching source file in INPUT_DIR is parsed; the run either
    writes all outputs or, on a read failure, none of them.
    """
    source = dataclasses.replace(
        config.source,
        input_dir=input_dir or config.source.input_dir,
        exclude=exclude if exclude is not None else config.source.exclude,
    )
    output = dataclasses.replace(
        config.output,
        output_dir=output_dir or config.output.output_dir,
        combined_table=combined_table or config.output.combined_table,
        index_file=index_file or config.output.index_file,
    )
    config = dataclasses.replace(config, source=source, output=output)

    try:
        paths = collect_documents(source.input_dir, source.pattern)
        click.echo(f"Found {len(paths)} source files")
        result = DocumentationBuilder(config).build(paths)
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Wrote {len(result.file_pages)} file pages to {output.output_dir}")
    click.echo(
        f"Combined table: {result.combined_table} "
        f"({result.document_count} files, {result.macro_count} macros)"
    )
    click.echo(f"Index: {result.index_page}")


@macrodoc.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "comments"]),
    default="yaml",
    help="Print parsed data as YAML or as normalised comment blocks.",
)
@click.pass_obj
def inspect(config: AppConfig, path: str, output_format: str) -> None:
    """Show how a single source file is parsed."""
    parser = _parser_from_config(config)
    try:
        parsed = parser.parse_file(path, encoding=config.source.encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(str(e)) from e

    if output_format == "yaml":
        click.echo(
            yaml.safe_dump(
                parsed.to_dict(), sort_keys=False, allow_unicode=True, default_flow_style=False
            ),
            nl=False,
        )
        return

    prefix = config.parser.comment_prefix
    header_lines = format_fields(
        {k: v for k, v in parsed.header.fields.items() if v}, prefix=prefix
    )
    if header_lines:
        click.echo("\n".join(header_lines))
        click.echo()
    for record in parsed.records:
        lines = format_fields(
            record.fields, prefix=prefix, signature=record.name, notes_field=NOTES_FIELD
        )
        click.echo("\n".join(lines))
        click.echo(f"{config.parser.block_opener} {record.name}")
        click.echo()
    logger.debug("Inspected %s (%d macros)", Path(path).name, len(parsed.macros))
