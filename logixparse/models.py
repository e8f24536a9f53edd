"""
Unified project model produced by both the L5K and L5X parsers.

Every parser builds a fresh ParseResult per call; the records below are plain
values that downstream consumers (cross-referencing, documentation, health
scoring) only read.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

CONTROLLER_SCOPE = "Controller"


class UsageType(Enum):
    """How a rung uses a tag."""
    READ = "read"
    WRITE = "write"
    BOTH = "both"


class SourceFormat(Enum):
    """Export format a ParseResult was built from."""
    L5K = "L5K"
    L5X = "L5X"


@dataclass
class Tag:
    """A controller- or program-scoped tag."""
    name: str
    data_type: str
    scope: str = CONTROLLER_SCOPE  # "Controller" or the owning program name
    description: Optional[str] = None
    value: Optional[str] = None
    alias_for: Optional[str] = None
    usage: Optional[str] = None
    radix: Optional[str] = None
    external_access: Optional[str] = None
    dimensions: Optional[str] = None


@dataclass
class IOModule:
    """An I/O module from the module tree."""
    name: str
    catalog_number: Optional[str] = None
    parent_module: Optional[str] = None
    slot: Optional[int] = None
    connection_info: Optional[Dict[str, Any]] = None


@dataclass
class Routine:
    """A routine inside a program or an AOI."""
    name: str
    program_name: str
    type: str = "Unknown"
    description: Optional[str] = None
    rung_count: Optional[int] = None  # None for non-ladder bodies


@dataclass
class Rung:
    """One ladder rung with its comment split off."""
    number: int
    routine_name: str
    program_name: str
    content: str
    comment: Optional[str] = None
    tag_references: List[str] = field(default_factory=list)


@dataclass
class TagReference:
    """A tag name seen in a rung and how that rung uses it."""
    tag_name: str
    routine_name: str
    program_name: str
    rung_number: int
    usage_type: UsageType = UsageType.READ


@dataclass
class UDTMember:
    name: str
    data_type: str
    dimension: Optional[str] = None
    radix: Optional[str] = None
    external_access: Optional[str] = None
    description: Optional[str] = None


@dataclass
class UDT:
    """A user-defined data type. Only types with members are kept."""
    name: str
    description: Optional[str] = None
    family_type: Optional[str] = None
    members: List[UDTMember] = field(default_factory=list)


@dataclass
class AOIParameter:
    name: str
    data_type: str
    usage: str = "Input"  # Input, Output or InOut
    required: bool = False
    visible: bool = True
    external_access: Optional[str] = None
    description: Optional[str] = None
    default_value: Optional[str] = None


@dataclass
class AOILocalTag:
    name: str
    data_type: str
    radix: Optional[str] = None
    external_access: Optional[str] = None
    description: Optional[str] = None


@dataclass
class AOI:
    """An Add-On Instruction definition."""
    name: str
    description: Optional[str] = None
    revision: Optional[str] = None
    vendor: Optional[str] = None
    execute_prescan: bool = False
    execute_postscan: bool = False
    execute_enable_in_false: bool = False
    created_date: Optional[str] = None
    created_by: Optional[str] = None
    edited_date: Optional[str] = None
    edited_by: Optional[str] = None
    parameters: List[AOIParameter] = field(default_factory=list)
    local_tags: List[AOILocalTag] = field(default_factory=list)
    routines: List[Routine] = field(default_factory=list)


@dataclass
class Task:
    """A task and the programs it schedules, in execution order."""
    name: str
    type: str = "CONTINUOUS"  # CONTINUOUS, PERIODIC, EVENT
    rate: Optional[int] = None
    priority: int = 10
    watchdog: Optional[int] = None
    inhibit_task: bool = False
    disable_update_outputs: bool = False
    description: Optional[str] = None
    scheduled_programs: List[str] = field(default_factory=list)


@dataclass
class ProjectMetadata:
    project_name: Optional[str] = None
    processor_type: Optional[str] = None
    software_revision: Optional[str] = None
    target_type: Optional[str] = None
    target_name: Optional[str] = None
    export_date: Optional[str] = None


@dataclass
class ParseResult:
    """Everything extracted from one export file."""
    source_format: SourceFormat
    tags: List[Tag] = field(default_factory=list)
    modules: List[IOModule] = field(default_factory=list)
    routines: List[Routine] = field(default_factory=list)
    rungs: List[Rung] = field(default_factory=list)
    tag_references: List[TagReference] = field(default_factory=list)
    udts: List[UDT] = field(default_factory=list)
    aois: List[AOI] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)

    def summary(self) -> Dict[str, Any]:
        """Counts per collection, handy for logging and the CLI."""
        return {
            'source_format': self.source_format.value,
            'project_name': self.metadata.project_name,
            'tags_count': len(self.tags),
            'modules_count': len(self.modules),
            'routines_count': len(self.routines),
            'rungs_count': len(self.rungs),
            'tag_references_count': len(self.tag_references),
            'udts_count': len(self.udts),
            'aois_count': len(self.aois),
            'tasks_count': len(self.tasks),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form with enums flattened to their values."""
        return asdict(self, dict_factory=enum_safe_dict)


def enum_safe_dict(items) -> Dict[str, Any]:
    return {key: (value.value if isinstance(value, Enum) else value) for key, value in items}
