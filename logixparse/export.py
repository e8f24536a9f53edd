"""
Export a ParseResult to structured JSON.

Components can be selected individually so downstream tools only receive what
they consume (e.g. just tags and tag references for cross-referencing).
"""

import json
import logging
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import ParseResult, enum_safe_dict

logger = logging.getLogger(__name__)


class ExportComponent(Enum):
    """Components that can be exported."""
    TAGS = "tags"
    MODULES = "modules"
    ROUTINES = "routines"
    RUNGS = "rungs"
    TAG_REFERENCES = "tag_references"
    UDTS = "udts"
    AOIS = "aois"
    TASKS = "tasks"


DEFAULT_COMPONENTS: List[str] = [component.value for component in ExportComponent]


def _records(items: List[Any]) -> List[Dict[str, Any]]:
    return [asdict(item, dict_factory=enum_safe_dict) for item in items]


def build_export_data(result: ParseResult, include: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Build the export document without writing it.

    Args:
        result: Parsed project
        include: Component names to include; all components when None

    Returns:
        Dictionary with a ``metadata`` section plus one list per component
    """
    if include is None:
        include = DEFAULT_COMPONENTS

    export_components = []
    for component in include:
        try:
            export_components.append(ExportComponent(component))
        except ValueError:
            logger.warning(f"Unknown export component: {component}")

    export_data: Dict[str, Any] = {
        "metadata": {
            "export_time": datetime.now().isoformat(),
            "source_format": result.source_format.value,
            "project": asdict(result.metadata),
            "exported_components": [component.value for component in export_components],
            "summary": result.summary(),
        }
    }

    for component in export_components:
        export_data[component.value] = _records(getattr(result, component.value))

    return export_data


def export_result_to_json(
    result: ParseResult,
    output_path: Union[str, Path],
    include: Optional[List[str]] = None,
    pretty_print: bool = True
) -> Dict[str, Any]:
    """
    Export selected components of a ParseResult to a JSON file.

    Args:
        result: Parsed project
        output_path: Path to the output JSON file
        include: Components to include (tags, rungs, udts, ...); all when None
        pretty_print: Whether to format JSON with indentation

    Returns:
        Dictionary containing the exported data
    """
    export_data = build_export_data(result, include)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        if pretty_print:
            json.dump(export_data, f, indent=2, default=str)
        else:
            json.dump(export_data, f, default=str)

    logger.info(f"Exported {len(export_data) - 1} components to {output_path}")
    return export_data
