#!/usr/bin/env python3
"""
CLI tool for reconstructing executed SQL from a data-access log.

Usage:
    python extract_sql.py --in stcApp.log --id 1a2b3c --format text
    python extract_sql.py --in stcApp.log            # most recent query
"""

import click
import json
import logging
import os
import sys
from pathlib import Path

# Add the package to Python path
sys.path.insert(0, os.path.dirname(__file__))

from logsql import LogScanner, QueryProcessor
from logsql.clipboard import CommandClipboard
from logsql.config import load_config
from logsql.io_utils import JSONLWriter, ensure_directory, write_executions_csv
from logsql.models import ProcessResult


def _render_text(result: ProcessResult, pretty: bool) -> str:
    """Render a process result as human-readable text."""
    lines = []
    for group_num, group in enumerate(result.groups, 1):
        lines.append(f"=== Query {group_num} ({len(group.executions)} execution(s)) ===")
        lines.append(group.formatted_template_sql if pretty else group.template_sql)
        lines.append("")
        for execution in group.executions:
            header = f"--- #{execution.execution_index}"
            if execution.timestamp:
                header += f" {execution.timestamp}"
            if execution.dao:
                header += f" [{execution.dao}]"
            lines.append(header)
            lines.append(execution.filled_sql)
            lines.append("")
    lines.append("Parameters:")
    lines.append(result.formatted_params.rstrip('\n'))
    return "\n".join(lines)


@click.command()
@click.option('--input', '--in', 'input_file',
              type=click.Path(),
              help='Log file to read (default: log_file_path from config)')
@click.option('--id', 'target_id',
              help='Transaction id to resolve (default: most recent query)')
@click.option('--config', 'config_file',
              type=click.Path(),
              help='JSON settings file (default: log_parser_config.json)')
@click.option('--encoding',
              help='Encoding of the log file, or "auto" to detect')
@click.option('--copy/--no-copy',
              default=None,
              help='Copy the filled SQL to the clipboard (default: auto_copy from config)')
@click.option('--format', 'output_format',
              type=click.Choice(['text', 'json', 'jsonl', 'csv']),
              default='text',
              help='Output format (default: text)')
@click.option('--output', '--out', 'output_file',
              type=click.Path(),
              help='Write output to this file instead of stdout')
@click.option('--verbose', '-v',
              is_flag=True,
              help='Enable verbose output')
def extract_sql(input_file: str,
                target_id: str,
                config_file: str,
                encoding: str,
                copy: bool,
                output_format: str,
                output_file: str,
                verbose: bool):
    """
    Reconstruct the SQL that ran for a transaction id.

    Finds the SQL template and every parameter set logged under the id,
    substitutes the parameters into the template, and groups executions
    that share a template.

    Examples:

    \b
    # Most recent query, copied to the clipboard
    python extract_sql.py --in stcApp.log --copy

    \b
    # Every execution of one id as CSV
    python extract_sql.py --in stcApp.log --id 1a2b3c --format csv --out runs.csv
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    config = load_config(config_file)
    log_file = input_file or config.log_file_path
    if not log_file:
        click.echo("Error: No log file given (use --in or set log_file_path in config)")
        sys.exit(1)

    auto_copy = config.auto_copy if copy is None else copy
    scanner = LogScanner(encoding=encoding or config.encoding, show_progress=verbose)
    processor = QueryProcessor(scanner=scanner, clipboard=CommandClipboard())

    if verbose:
        click.echo(f"Log file: {log_file}")
        click.echo(f"Encoding: {scanner.encoding}")
        click.echo(f"Target: {target_id or 'most recent query'}")

    try:
        if target_id:
            result = processor.process_query(target_id, log_file, auto_copy)
        else:
            result = processor.process_last_query(log_file, auto_copy)

        if not result.success:
            click.echo(f"Error: {result.error}")
            sys.exit(1)

        if output_file:
            ensure_directory(Path(output_file).parent)

        if output_format == 'jsonl':
            if not output_file:
                for execution in result.executions:
                    click.echo(json.dumps(execution.to_dict(), ensure_ascii=False))
            else:
                with JSONLWriter(output_file) as writer:
                    writer.write_executions(result.executions)
        elif output_format == 'csv':
            if not output_file:
                click.echo("Error: --format csv requires --out")
                sys.exit(1)
            rows = write_executions_csv(result.executions, output_file, config.csv_separator)
            click.echo(f"Wrote {rows} execution(s) to {Path(output_file).absolute()}")
        else:
            if output_format == 'json':
                text = result.to_json(ensure_ascii=False, indent=2)
            else:
                text = _render_text(result, config.format_sql)
            if output_file:
                with open(output_file, 'w', encoding='utf-8') as f:
                    f.write(text + '\n')
            else:
                click.echo(text)

        if auto_copy:
            status = "copied to clipboard" if result.copied_to_clipboard else "clipboard copy failed"
            click.echo(f"Filled SQL {status}", err=True)

    except KeyboardInterrupt:
        click.echo("\nCancelled by user")
        sys.exit(1)


if __name__ == '__main__':
    extract_sql()
