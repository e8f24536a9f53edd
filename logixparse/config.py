"""
YAML configuration for the command-line export.

Example::

    export:
      include: [tags, rungs, tag_references]
      pretty_print: false
    logging:
      level: INFO
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import yaml

from .export import DEFAULT_COMPONENTS

logger = logging.getLogger(__name__)


@dataclass
class ExportConfig:
    """Settings for the parse/export command."""
    include: List[str] = field(default_factory=lambda: list(DEFAULT_COMPONENTS))
    pretty_print: bool = True
    log_level: str = "WARNING"


def load_config(config_path: Optional[Union[str, Path]]) -> ExportConfig:
    """Load export settings from YAML, falling back to defaults on any problem."""
    if not config_path:
        return ExportConfig()
    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        export_section = config_data.get('export', {}) or {}
        logging_section = config_data.get('logging', {}) or {}

        include = export_section.get('include')
        if isinstance(include, str):
            include = [include]

        return ExportConfig(
            include=list(include) if include else list(DEFAULT_COMPONENTS),
            pretty_print=bool(export_section.get('pretty_print', True)),
            log_level=str(logging_section.get('level', "WARNING")).upper(),
        )
    except (OSError, yaml.YAMLError, AttributeError, TypeError) as e:
        logger.warning(f"Could not load config from {config_path}: {e}")
        return ExportConfig()
