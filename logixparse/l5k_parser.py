"""
L5K Parser

Parses the Allen Bradley L5K plaintext export (nested ``KEYWORD ... END_KEYWORD``
blocks) into the unified ParseResult:
- Controller metadata
- Controller- and program-scoped tags
- User-defined data types
- Add-On Instruction definitions with parameters, local tags and routines
- Programs, routines, rungs and tag references
- I/O modules
- Tasks and the programs they schedule
"""

import re
import logging
from typing import Any, Dict, List, Optional, Tuple

from .declarations import (
    flag, iter_block_declarations, iter_statements, lookup, parse_datatype_members,
    parse_local_tag_declaration, parse_parameter_declaration, parse_tag_declaration
)
from .errors import MissingRootBlockError
from .l5k_blocks import (
    block_body, extract_blocks, iter_block_spans, parse_attributes, parse_block_header
)
from .ladder import analyze_rung
from .models import (
    AOI, AOILocalTag, AOIParameter, CONTROLLER_SCOPE, IOModule, ParseResult,
    ProjectMetadata, Routine, Rung, SourceFormat, Tag, TagReference, Task, UDT
)
from .rungs import split_rung_body, split_rungs
from .values import to_int

logger = logging.getLogger(__name__)

# routine block keyword -> routine type when the header carries no Type attribute
ROUTINE_KEYWORDS: Dict[str, str] = {
    "ROUTINE": "RLL",
    "ST_ROUTINE": "ST",
    "FBD_ROUTINE": "FBD",
    "SFC_ROUTINE": "SFC",
}

RE_EXPORTED = re.compile(r'^\s*Exported\s*:=\s*(?P<date>.+?)\s*$', re.MULTILINE)


class L5KParser:
    """Parses L5K export text into a ParseResult. Holds no state between calls."""

    def parse(self, text: str) -> ParseResult:
        """
        Parse a complete L5K export.

        Args:
            text: Full L5K file content

        Returns:
            A new ParseResult

        Raises:
            MissingRootBlockError: If the text has no CONTROLLER block
        """
        logger.info("Parsing L5K content...")

        spans = list(iter_block_spans(text, "CONTROLLER"))
        if not spans:
            raise MissingRootBlockError("Invalid L5K file: missing CONTROLLER block")
        start, end = spans[0]
        controller_block = text[start:end]

        result = ParseResult(source_format=SourceFormat.L5K)
        result.metadata = self._parse_metadata(controller_block, text[:start])

        result.tags.extend(self._parse_controller_tags(controller_block))
        result.udts = self._parse_data_types(controller_block)
        result.aois = self._parse_aois(controller_block)

        for block in extract_blocks(controller_block, "PROGRAM"):
            tags, routines, rungs, references = self._parse_program(block)
            result.tags.extend(tags)
            result.routines.extend(routines)
            result.rungs.extend(rungs)
            result.tag_references.extend(references)

        result.modules = self._parse_modules(controller_block)
        result.tasks = self._parse_tasks(controller_block)

        summary = result.summary()
        logger.info(f"Parsed {summary['tags_count']} tags, {summary['routines_count']} routines, "
                    f"{summary['rungs_count']} rungs, {summary['udts_count']} UDTs, "
                    f"{summary['aois_count']} AOIs, {summary['modules_count']} modules")
        return result

    def _parse_metadata(self, controller_block: str, preamble: str) -> ProjectMetadata:
        """Controller header attributes plus the export date from the file banner."""
        name, attr_string = parse_block_header(controller_block, "CONTROLLER")
        attrs = parse_attributes(attr_string)

        major = lookup(attrs, "Major")
        software_revision = None
        if major:
            software_revision = f"{major}.{lookup(attrs, 'Minor') or '0'}"

        export_date = None
        exported = RE_EXPORTED.search(preamble)
        if exported:
            export_date = exported.group('date')

        return ProjectMetadata(
            project_name=name,
            processor_type=lookup(attrs, "ProcessorType"),
            software_revision=software_revision,
            target_type="Controller",
            target_name=name,
            export_date=export_date,
        )

    def _parse_tag_block(self, tag_block: str, scope: str) -> List[Tag]:
        tags = []
        for decl in iter_block_declarations(tag_block, "TAG"):
            tag = parse_tag_declaration(decl, scope)
            if tag:
                tags.append(tag)
            else:
                logger.debug(f"Skipping unparseable tag declaration: {decl[:60]!r}")
        return tags

    def _parse_controller_tags(self, controller_block: str) -> List[Tag]:
        """Parse TAG blocks that are not nested inside a PROGRAM block."""
        program_spans = list(iter_block_spans(controller_block, "PROGRAM"))
        tags: List[Tag] = []

        for tag_start, tag_end in iter_block_spans(controller_block, "TAG"):
            inside_program = any(
                prog_start < tag_start < prog_end for prog_start, prog_end in program_spans
            )
            if inside_program:
                continue
            tags.extend(self._parse_tag_block(controller_block[tag_start:tag_end], CONTROLLER_SCOPE))

        logger.debug(f"Parsed {len(tags)} controller tags")
        return tags

    def _parse_data_types(self, controller_block: str) -> List[UDT]:
        """Parse DATATYPE blocks; types without members are predefined and dropped."""
        udts: List[UDT] = []
        for block in extract_blocks(controller_block, "DATATYPE"):
            name, attr_string = parse_block_header(block, "DATATYPE")
            attrs = parse_attributes(attr_string)
            members = parse_datatype_members(block)
            if not members:
                logger.debug(f"Skipping data type {name} with no members")
                continue
            udts.append(UDT(
                name=name,
                description=lookup(attrs, "Description"),
                family_type=lookup(attrs, "FamilyType"),
                members=members,
            ))
        return udts

    def _parse_aois(self, controller_block: str) -> List[AOI]:
        aois: List[AOI] = []
        for block in extract_blocks(controller_block, "ADD_ON_INSTRUCTION_DEFINITION"):
            name, attr_string = parse_block_header(block, "ADD_ON_INSTRUCTION_DEFINITION")
            attrs = parse_attributes(attr_string)

            routines, _, _ = self._parse_routines(block, name)

            aois.append(AOI(
                name=name,
                description=lookup(attrs, "Description"),
                revision=lookup(attrs, "Revision"),
                vendor=lookup(attrs, "Vendor"),
                execute_prescan=flag(attrs, "ExecutePrescan"),
                execute_postscan=flag(attrs, "ExecutePostscan"),
                execute_enable_in_false=flag(attrs, "ExecuteEnableInFalse"),
                created_date=lookup(attrs, "CreatedDate"),
                created_by=lookup(attrs, "CreatedBy"),
                edited_date=lookup(attrs, "EditedDate"),
                edited_by=lookup(attrs, "EditedBy"),
                parameters=self._parse_aoi_parameters(block),
                local_tags=self._parse_aoi_local_tags(block),
                routines=routines,
            ))
        return aois

    def _parse_aoi_parameters(self, aoi_block: str) -> List[AOIParameter]:
        params: List[AOIParameter] = []
        for block in extract_blocks(aoi_block, "PARAMETERS"):
            for decl in iter_block_declarations(block, "PARAMETERS"):
                param = parse_parameter_declaration(decl)
                if param:
                    params.append(param)
        return params

    def _parse_aoi_local_tags(self, aoi_block: str) -> List[AOILocalTag]:
        local_tags: List[AOILocalTag] = []
        for block in extract_blocks(aoi_block, "LOCAL_TAGS"):
            for decl in iter_block_declarations(block, "LOCAL_TAGS"):
                local_tag = parse_local_tag_declaration(decl)
                if local_tag:
                    local_tags.append(local_tag)
        return local_tags

    def _parse_program(self, program_block: str) -> Tuple[List[Tag], List[Routine], List[Rung], List[TagReference]]:
        program_name = parse_block_header(program_block, "PROGRAM").name

        tags: List[Tag] = []
        for tag_block in extract_blocks(program_block, "TAG"):
            tags.extend(self._parse_tag_block(tag_block, program_name))

        routines, rungs, references = self._parse_routines(program_block, program_name)
        logger.debug(f"Program {program_name}: {len(tags)} tags, {len(routines)} routines, {len(rungs)} rungs")
        return tags, routines, rungs, references

    def _parse_routines(self, container: str, program_name: str) -> Tuple[List[Routine], List[Rung], List[TagReference]]:
        """Parse every routine block of a program or AOI in source order."""
        found = []
        for keyword in ROUTINE_KEYWORDS:
            for start, end in iter_block_spans(container, keyword):
                found.append((start, keyword, container[start:end]))
        found.sort(key=lambda item: item[0])

        routines: List[Routine] = []
        rungs: List[Rung] = []
        references: List[TagReference] = []

        for _, keyword, block in found:
            name, attr_string = parse_block_header(block, keyword)
            attrs = parse_attributes(attr_string)
            routine_type = lookup(attrs, "Type") or ROUTINE_KEYWORDS[keyword]

            routine_rungs: List[Rung] = []
            if keyword == "ROUTINE":
                routine_rungs, routine_refs = self._parse_rungs(block, name, program_name)
                references.extend(routine_refs)

            routines.append(Routine(
                name=name,
                program_name=program_name,
                type=routine_type,
                description=lookup(attrs, "Description"),
                rung_count=len(routine_rungs) if routine_rungs else None,
            ))
            rungs.extend(routine_rungs)

        return routines, rungs, references

    def _parse_rungs(self, routine_block: str, routine_name: str, program_name: str) -> Tuple[List[Rung], List[TagReference]]:
        """Number rungs by position; the N: marker carries no number."""
        rungs: List[Rung] = []
        references: List[TagReference] = []

        number = 0
        for section in split_rungs(routine_block):
            if not section.body.strip():
                continue
            comment, content = split_rung_body(section.body)
            if comment is None:
                comment = section.comment

            rung, rung_refs = analyze_rung(number, content, comment, routine_name, program_name)
            rungs.append(rung)
            references.extend(rung_refs)
            number += 1

        return rungs, references

    def _parse_modules(self, controller_block: str) -> List[IOModule]:
        modules: List[IOModule] = []
        for block in extract_blocks(controller_block, "MODULE"):
            name, attr_string = parse_block_header(block, "MODULE")
            attrs = parse_attributes(attr_string)

            modules.append(IOModule(
                name=name,
                catalog_number=lookup(attrs, "CatalogNumber"),
                parent_module=lookup(attrs, "ParentModule") or lookup(attrs, "Parent"),
                slot=to_int(lookup(attrs, "Slot")),
                connection_info=self._parse_module_connections(block),
            ))
        return modules

    def _parse_module_connections(self, module_block: str) -> Optional[Dict[str, Any]]:
        """CONNECTION sub-blocks of a module, or None when there are none."""
        connections = []
        for block in extract_blocks(module_block, "CONNECTION"):
            name, attr_string = parse_block_header(block, "CONNECTION")
            connection: Dict[str, Any] = {'name': name}
            connection.update(parse_attributes(attr_string))
            connections.append(connection)
        if not connections:
            return None
        return {'connections': connections}

    def _parse_tasks(self, controller_block: str) -> List[Task]:
        """Parse TASK blocks; the body lists scheduled programs one per statement."""
        tasks: List[Task] = []
        for block in extract_blocks(controller_block, "TASK"):
            name, attr_string = parse_block_header(block, "TASK")
            attrs = parse_attributes(attr_string)

            task_type = (lookup(attrs, "Type") or "CONTINUOUS").upper()
            scheduled = []
            for statement in iter_statements(block_body(block, "TASK").splitlines()):
                program = statement.rstrip(';').strip()
                if program:
                    scheduled.append(program)

            priority = to_int(lookup(attrs, "Priority"))
            tasks.append(Task(
                name=name,
                type=task_type,
                rate=to_int(lookup(attrs, "Rate")) if task_type == "PERIODIC" else None,
                priority=priority if priority is not None else 10,
                watchdog=to_int(lookup(attrs, "Watchdog")),
                inhibit_task=flag(attrs, "InhibitTask"),
                disable_update_outputs=flag(attrs, "DisableUpdateOutputs"),
                description=lookup(attrs, "Description"),
                scheduled_programs=scheduled,
            ))
        return tasks


def parse_l5k(text: str) -> ParseResult:
    """Parse L5K export text into a new ParseResult."""
    return L5KParser().parse(text)
