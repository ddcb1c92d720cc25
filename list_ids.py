#!/usr/bin/env python3
"""
CLI tool for listing the transaction ids that logged SQL.

Usage:
    python list_ids.py --in stcApp.log
"""

import click
import json
import logging
import os
import sys

# Add the package to Python path
sys.path.insert(0, os.path.dirname(__file__))

from logsql import LogScanner
from logsql.config import load_config


@click.command()
@click.option('--input', '--in', 'input_file',
              type=click.Path(),
              help='Log file to read (default: log_file_path from config)')
@click.option('--config', 'config_file',
              type=click.Path(),
              help='JSON settings file (default: log_parser_config.json)')
@click.option('--encoding',
              help='Encoding of the log file, or "auto" to detect')
@click.option('--json', 'as_json',
              is_flag=True,
              help='Print the catalog as JSON')
@click.option('--progress',
              is_flag=True,
              help='Show a progress bar while scanning')
@click.option('--verbose', '-v',
              is_flag=True,
              help='Enable verbose output')
def list_ids(input_file: str,
             config_file: str,
             encoding: str,
             as_json: bool,
             progress: bool,
             verbose: bool):
    """
    List transaction ids with SQL, in order of first appearance.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    config = load_config(config_file)
    log_file = input_file or config.log_file_path
    if not log_file:
        click.echo("Error: No log file given (use --in or set log_file_path in config)")
        sys.exit(1)

    scanner = LogScanner(encoding=encoding or config.encoding, show_progress=progress)
    ids = scanner.list_ids(log_file)

    if as_json:
        click.echo(json.dumps([info.to_dict() for info in ids], ensure_ascii=False, indent=2))
        return

    if not ids:
        click.echo(f"No SQL ids found in {log_file}")
        return

    click.echo(f"{'ID':<24} {'PARAMS':>6}")
    for info in ids:
        click.echo(f"{info.id:<24} {info.params_count:>6}")
    click.echo(f"\n{len(ids)} id(s)")


if __name__ == '__main__':
    list_ids()
