"""
Settings consumed by the scanner and the command-line tools.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dataclasses_json import dataclass_json

from .encoding import DEFAULT_ENCODING

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "log_parser_config.json"


@dataclass_json
@dataclass
class ScannerConfig:
    log_file_path: str = ""
    encoding: str = DEFAULT_ENCODING
    auto_copy: bool = True
    format_sql: bool = True
    csv_separator: str = ","


def load_config(path: Optional[Union[str, Path]] = None) -> ScannerConfig:
    """
    Load settings from a JSON file.

    A missing or unreadable file yields the defaults; unknown keys are
    ignored and empty values fall back to their defaults.
    """
    config_path = Path(path or DEFAULT_CONFIG_FILE)
    config = ScannerConfig()

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            known = {k: v for k, v in data.items() if k in ScannerConfig.__dataclass_fields__}
            config = ScannerConfig.from_dict(known)
        except (json.JSONDecodeError, IOError, AttributeError, TypeError, KeyError) as e:
            logger.warning("Ignoring invalid config file %s: %s", config_path, e)

    if not config.encoding:
        config.encoding = DEFAULT_ENCODING
    if not config.csv_separator:
        config.csv_separator = ","

    return config
