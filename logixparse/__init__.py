"""
logixparse - parse Rockwell Logix L5K and L5X exports into one project model.
"""

__version__ = "1.0.0"

from .errors import LogixParseError, MissingRootBlockError, MissingRootNodeError
from .models import (
    AOI, AOILocalTag, AOIParameter, IOModule, ParseResult, ProjectMetadata,
    Routine, Rung, SourceFormat, Tag, TagReference, Task, UDT, UDTMember, UsageType
)
from .l5k_parser import L5KParser, parse_l5k
from .l5x_parser import L5XParser, parse_l5x
from .ladder import determine_usage_type, extract_tag_references
from .loader import detect_format, load_text, parse_file
from .export import ExportComponent, export_result_to_json

__all__ = [
    "__version__",
    "LogixParseError",
    "MissingRootBlockError",
    "MissingRootNodeError",
    "AOI",
    "AOILocalTag",
    "AOIParameter",
    "IOModule",
    "ParseResult",
    "ProjectMetadata",
    "Routine",
    "Rung",
    "SourceFormat",
    "Tag",
    "TagReference",
    "Task",
    "UDT",
    "UDTMember",
    "UsageType",
    "L5KParser",
    "parse_l5k",
    "L5XParser",
    "parse_l5x",
    "determine_usage_type",
    "extract_tag_references",
    "detect_format",
    "load_text",
    "parse_file",
    "ExportComponent",
    "export_result_to_json",
]
