"""
L5X Parser

Maps an L5X document (already deserialized into an ElementTree) onto the same
ParseResult the L5K parser builds. Only ladder rung text is scanned, using the
shared extractor and usage classifier; everything else is read from element
attributes.

Rung numbers are taken from each Rung element's ``Number`` attribute as
declared, unlike L5K where rungs are numbered by position.
"""

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import MissingRootNodeError
from .ladder import analyze_rung
from .models import (
    AOI, AOILocalTag, AOIParameter, CONTROLLER_SCOPE, IOModule, ParseResult,
    ProjectMetadata, Routine, Rung, SourceFormat, Tag, TagReference, Task, UDT,
    UDTMember
)
from .values import to_bool, to_int

logger = logging.getLogger(__name__)

ROOT_ELEMENT_NAME = "RSLogix5000Content"

L5XSource = Union[str, bytes, ET.Element, ET.ElementTree]


def _local(tag: str) -> str:
    """Element name without its namespace."""
    return tag.rsplit('}', 1)[-1] if '}' in tag else tag


def _children(node: Optional[ET.Element], name: str) -> List[ET.Element]:
    """All direct children called name, always as a list (possibly empty)."""
    if node is None:
        return []
    return [child for child in node if _local(child.tag) == name]


def _child(node: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    found = _children(node, name)
    return found[0] if found else None


def _collection(node: Optional[ET.Element], container: str, item: str) -> List[ET.Element]:
    """Items of a wrapper element, e.g. ``Tags/Tag``."""
    return _children(_child(node, container), item)


def _text(node: Optional[ET.Element]) -> Optional[str]:
    """Text of an element or of a nested localized wrapper."""
    if node is None:
        return None
    if node.text and node.text.strip():
        return node.text.strip()
    for child in node:
        if _local(child.tag).startswith("Localized") and child.text and child.text.strip():
            return child.text.strip()
    return None


def _description(node: ET.Element) -> Optional[str]:
    return _text(_child(node, "Description"))


def element_to_dict(node: ET.Element) -> Dict[str, Any]:
    """
    Convert an element subtree to plain dicts.

    Attributes become ``@Name`` keys, non-blank text ``#text``; repeated child
    names become lists.
    """
    data: Dict[str, Any] = {f"@{key}": value for key, value in node.attrib.items()}
    if node.text and node.text.strip():
        data["#text"] = node.text.strip()
    for child in node:
        key = _local(child.tag)
        value = element_to_dict(child)
        if key in data:
            if not isinstance(data[key], list):
                data[key] = [data[key]]
            data[key].append(value)
        else:
            data[key] = value
    return data


class L5XParser:
    """Maps an L5X element tree into a ParseResult. Holds no state between calls."""

    def parse(self, source: L5XSource) -> ParseResult:
        """
        Parse an L5X document.

        Args:
            source: Root Element or ElementTree; XML text is also accepted

        Returns:
            A new ParseResult

        Raises:
            MissingRootNodeError: If the RSLogix5000Content root or its Controller is absent
        """
        logger.info("Parsing L5X content...")
        root = self._resolve_root(source)

        if _local(root.tag) != ROOT_ELEMENT_NAME:
            raise MissingRootNodeError(f"Invalid L5X file: missing {ROOT_ELEMENT_NAME}")
        controller = _child(root, "Controller")
        if controller is None:
            raise MissingRootNodeError("Invalid L5X file: missing Controller")

        result = ParseResult(source_format=SourceFormat.L5X)
        result.metadata = ProjectMetadata(
            project_name=controller.get("Name"),
            processor_type=controller.get("ProcessorType"),
            software_revision=controller.get("SoftwareRevision") or root.get("SoftwareRevision"),
            target_type=root.get("TargetType"),
            target_name=root.get("TargetName"),
            export_date=root.get("ExportDate"),
        )

        for tag in _collection(controller, "Tags", "Tag"):
            result.tags.append(self._parse_tag(tag, CONTROLLER_SCOPE))

        result.udts = self._parse_data_types(controller)
        result.aois = self._parse_aois(controller)

        for program in _collection(controller, "Programs", "Program"):
            program_name = program.get("Name") or "Unknown"
            for tag in _collection(program, "Tags", "Tag"):
                result.tags.append(self._parse_tag(tag, program_name))
            for routine in _collection(program, "Routines", "Routine"):
                parsed, rungs, references = self._parse_routine(routine, program_name)
                result.routines.append(parsed)
                result.rungs.extend(rungs)
                result.tag_references.extend(references)

        result.modules = [self._parse_module(module) for module in _collection(controller, "Modules", "Module")]
        result.tasks = [self._parse_task(task) for task in _collection(controller, "Tasks", "Task")]

        summary = result.summary()
        logger.info(f"Parsed {summary['tags_count']} tags, {summary['routines_count']} routines, "
                    f"{summary['rungs_count']} rungs, {summary['udts_count']} UDTs, "
                    f"{summary['aois_count']} AOIs, {summary['modules_count']} modules")
        return result

    def _resolve_root(self, source: L5XSource) -> ET.Element:
        if isinstance(source, (str, bytes)):
            try:
                return ET.fromstring(source)
            except ET.ParseError as e:
                raise MissingRootNodeError(f"Invalid L5X file: {e}") from e
        if isinstance(source, ET.ElementTree):
            root = source.getroot()
            if root is None:
                raise MissingRootNodeError(f"Invalid L5X file: missing {ROOT_ELEMENT_NAME}")
            return root
        return source

    def _tag_value(self, tag: ET.Element) -> Optional[str]:
        """Prefer the L5K-formatted data text, then a decorated scalar value."""
        data_nodes = _children(tag, "Data")
        for data in data_nodes:
            if data.get("Format") == "L5K" and _text(data):
                return _text(data)
        for data in data_nodes:
            value = _child(data, "DataValue")
            if value is not None and value.get("Value") is not None:
                return value.get("Value")
        for data in data_nodes:
            if data.get("Format") is None and _text(data):
                return _text(data)
        if data_nodes:
            return json.dumps([element_to_dict(data) for data in data_nodes])
        return None

    def _parse_tag(self, tag: ET.Element, scope: str) -> Tag:
        return Tag(
            name=tag.get("Name") or "",
            data_type=tag.get("DataType") or "Unknown",
            scope=scope,
            description=_description(tag),
            value=self._tag_value(tag),
            alias_for=tag.get("AliasFor"),
            usage=tag.get("Usage"),
            radix=tag.get("Radix"),
            external_access=tag.get("ExternalAccess"),
            dimensions=tag.get("Dimensions"),
        )

    def _parse_routine(self, routine: ET.Element, program_name: str) -> Tuple[Routine, List[Rung], List[TagReference]]:
        name = routine.get("Name") or ""
        rung_nodes = _collection(routine, "RLLContent", "Rung")

        rungs: List[Rung] = []
        references: List[TagReference] = []
        for position, node in enumerate(rung_nodes):
            number = to_int(node.get("Number"))
            if number is None:
                number = position
            content = (_text(_child(node, "Text")) or "").strip()
            if content.endswith(';'):
                content = content[:-1].strip()

            rung, rung_refs = analyze_rung(number, content, _text(_child(node, "Comment")), name, program_name)
            rungs.append(rung)
            references.extend(rung_refs)

        parsed = Routine(
            name=name,
            program_name=program_name,
            type=routine.get("Type") or "Unknown",
            description=_description(routine),
            rung_count=len(rung_nodes) if rung_nodes else None,
        )
        return parsed, rungs, references

    def _parse_data_types(self, controller: ET.Element) -> List[UDT]:
        udts: List[UDT] = []
        for data_type in _collection(controller, "DataTypes", "DataType"):
            members = []
            for member in _collection(data_type, "Members", "Member"):
                if to_bool(member.get("Hidden")):
                    continue
                dimension = member.get("Dimension")
                members.append(UDTMember(
                    name=member.get("Name") or "",
                    data_type=member.get("DataType") or "Unknown",
                    dimension=dimension if dimension not in (None, "", "0") else None,
                    radix=member.get("Radix"),
                    external_access=member.get("ExternalAccess"),
                    description=_description(member),
                ))
            if not members:
                logger.debug(f"Skipping data type {data_type.get('Name')} with no members")
                continue
            udts.append(UDT(
                name=data_type.get("Name") or "",
                description=_description(data_type),
                family_type=data_type.get("Family"),
                members=members,
            ))
        return udts

    def _parse_aois(self, controller: ET.Element) -> List[AOI]:
        aois: List[AOI] = []
        for aoi in _collection(controller, "AddOnInstructionDefinitions", "AddOnInstructionDefinition"):
            name = aoi.get("Name") or ""
            parameters = []
            for param in _collection(aoi, "Parameters", "Parameter"):
                default = _text(_child(param, "DefaultValue"))
                if default is None:
                    default = next(
                        (_text(d) for d in _children(param, "DefaultData") if d.get("Format") == "L5K"),
                        None
                    )
                parameters.append(AOIParameter(
                    name=param.get("Name") or "",
                    data_type=param.get("DataType") or "Unknown",
                    usage=param.get("Usage") or "Input",
                    required=to_bool(param.get("Required")),
                    visible=to_bool(param.get("Visible"), default=True),
                    external_access=param.get("ExternalAccess"),
                    description=_description(param),
                    default_value=default,
                ))

            local_tags = [
                AOILocalTag(
                    name=local.get("Name") or "",
                    data_type=local.get("DataType") or "Unknown",
                    radix=local.get("Radix"),
                    external_access=local.get("ExternalAccess"),
                    description=_description(local),
                )
                for local in _collection(aoi, "LocalTags", "LocalTag")
            ]

            routines = [
                self._parse_routine(routine, name)[0]
                for routine in _collection(aoi, "Routines", "Routine")
            ]

            aois.append(AOI(
                name=name,
                description=_description(aoi),
                revision=aoi.get("Revision"),
                vendor=aoi.get("Vendor"),
                execute_prescan=to_bool(aoi.get("ExecutePrescan")),
                execute_postscan=to_bool(aoi.get("ExecutePostscan")),
                execute_enable_in_false=to_bool(aoi.get("ExecuteEnableInFalse")),
                created_date=aoi.get("CreatedDate"),
                created_by=aoi.get("CreatedBy"),
                edited_date=aoi.get("EditedDate"),
                edited_by=aoi.get("EditedBy"),
                parameters=parameters,
                local_tags=local_tags,
                routines=routines,
            ))
        return aois

    def _parse_module(self, module: ET.Element) -> IOModule:
        slot = to_int(module.get("Slot"))
        if slot is None:
            # the upstream port address is the module's slot in its parent chassis
            for port in _collection(module, "Ports", "Port"):
                if to_bool(port.get("Upstream")):
                    slot = to_int(port.get("Address"))
                    break

        communications = _child(module, "Communications")
        return IOModule(
            name=module.get("Name") or "",
            catalog_number=module.get("CatalogNumber"),
            parent_module=module.get("ParentModule") or module.get("ParentModName"),
            slot=slot,
            connection_info={'communications': element_to_dict(communications)} if communications is not None else None,
        )

    def _parse_task(self, task: ET.Element) -> Task:
        task_type = (task.get("Type") or "CONTINUOUS").upper()
        priority = to_int(task.get("Priority"))
        return Task(
            name=task.get("Name") or "",
            type=task_type,
            rate=to_int(task.get("Rate")) if task_type == "PERIODIC" else None,
            priority=priority if priority is not None else 10,
            watchdog=to_int(task.get("Watchdog")),
            inhibit_task=to_bool(task.get("InhibitTask")),
            disable_update_outputs=to_bool(task.get("DisableUpdateOutputs")),
            description=_description(task),
            scheduled_programs=[
                scheduled.get("Name")
                for scheduled in _collection(task, "ScheduledPrograms", "ScheduledProgram")
                if scheduled.get("Name")
            ],
        )


def parse_l5x(source: L5XSource) -> ParseResult:
    """Parse an L5X element tree (or XML text) into a new ParseResult."""
    return L5XParser().parse(source)
