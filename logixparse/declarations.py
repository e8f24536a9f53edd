"""
Declaration parsing for L5K tag, parameter, local tag and UDT member lists.

Declarations are ``;``-terminated statements that may wrap over several
lines, e.g.::

    MyTag : DINT (Radix := Decimal, ExternalAccess := Read/Write) := 0;
    MyArray : DINT[10];
    MyAlias OF Local:1:I.Data.0 (RADIX := Decimal);
"""

import re
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .l5k_blocks import (
    block_body, find_matching_paren, find_unquoted_char, split_attribute_group
)
from .models import AOILocalTag, AOIParameter, Tag, UDTMember
from .values import to_bool

logger = logging.getLogger(__name__)

# <name> OF <target> [(attrs)]
RE_ALIAS_DECL = re.compile(
    r'^(?P<name>[A-Za-z_][\w.]*)\s+OF\s+(?P<target>[^\s(]+)\s*(?P<rest>.*)$',
    re.DOTALL
)
# DINT[10] / DINT [2,3]
RE_DIMENSIONED_TYPE = re.compile(r'^(?P<dtype>[\w:]+)\s*\[(?P<dims>.+)\]$')

# UDT member forms
RE_MEMBER_KEYWORD = re.compile(r'^MEMBER\s+(?P<name>[^\s(]+)\s*(?P<rest>.*)$', re.DOTALL)
RE_MEMBER_BIT = re.compile(
    r'^BIT\s+(?P<name>[A-Za-z_]\w*)\s+(?P<word>[A-Za-z_]\w*)\s*:\s*(?P<bit>\d+)\s*(?P<rest>.*)$',
    re.DOTALL
)
RE_MEMBER_TYPEFIRST = re.compile(
    r'^(?P<dtype>[A-Za-z_][\w:]*)\s+'
    r'(?P<name>[A-Za-z_]\w*)'
    r'(?:\s*\[(?P<dims>\d+(?:\s*,\s*\d+)*)\])?'
    r'\s*(?P<rest>.*)$',
    re.DOTALL
)


def lookup(attrs: Dict[str, str], key: str) -> Optional[str]:
    """Case-insensitive attribute lookup (exports mix ``Radix`` and ``RADIX``)."""
    if key in attrs:
        return attrs[key]
    lowered = key.lower()
    for name, value in attrs.items():
        if name.lower() == lowered:
            return value
    return None


def flag(attrs: Dict[str, str], key: str, default: bool = False) -> bool:
    """Interpret a Yes/No, true/false or 1/0 attribute."""
    return to_bool(lookup(attrs, key), default)


def iter_statements(lines: Iterable[str]) -> Iterator[str]:
    """
    Join physical lines into ``;``-terminated statements.

    Lines are trimmed and joined with a single space. A trailing statement with
    no terminating ``;`` is dropped.
    """
    current = ""
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue
        current = f"{current} {trimmed}" if current else trimmed
        if trimmed.endswith(';'):
            yield current
            current = ""
    if current:
        logger.debug(f"Dropping unterminated declaration: {current[:60]!r}")


def iter_block_declarations(block_text: str, keyword: str) -> Iterator[str]:
    """Yield the declarations inside an unnamed block such as TAG or PARAMETERS."""
    yield from iter_statements(block_body(block_text, keyword, named=False).splitlines())


def find_tag_colon(s: str) -> int:
    """Index of the first ':' that is not the start of ':='."""
    for i, ch in enumerate(s):
        if ch == ':' and (i + 1 >= len(s) or s[i + 1] != '='):
            return i
    return -1


def _strip_terminator(decl: str) -> str:
    s = decl.strip()
    if s.endswith(';'):
        s = s[:-1].strip()
    return s


def _split_name_and_rest(s: str) -> Optional[Tuple[str, str]]:
    colon = find_tag_colon(s)
    if colon == -1:
        return None
    return s[:colon].strip(), s[colon + 1:].strip()


def _split_type(rest: str) -> Tuple[str, str]:
    """Split ``DINT[10] (attrs) := 0`` into the type text and what follows it."""
    paren = find_unquoted_char(rest, '(')
    assign = rest.find(':=')
    if paren != -1 and (assign == -1 or paren < assign):
        end = paren
    elif assign != -1:
        end = assign
    else:
        end = len(rest)
    return rest[:end].strip(), rest[end:].strip()


def _split_dimensions(data_type: str) -> Tuple[str, Optional[str]]:
    match = RE_DIMENSIONED_TYPE.match(data_type)
    if match:
        return match.group('dtype'), match.group('dims').strip()
    return data_type, None


def parse_tag_declaration(decl: str, scope: str) -> Optional[Tag]:
    """
    Parse one tag declaration.

    Args:
        decl: Declaration text, with or without its trailing ``;``
        scope: ``Controller`` or the owning program name

    Returns:
        Tag, or None when the text has no name/type separator
    """
    s = _strip_terminator(decl)
    if not s:
        return None

    alias_match = RE_ALIAS_DECL.match(s)
    if alias_match:
        attrs, _ = split_attribute_group(alias_match.group('rest'))
        return Tag(
            name=alias_match.group('name'),
            data_type=lookup(attrs, "DataType") or "Unknown",
            scope=scope,
            description=lookup(attrs, "Description"),
            alias_for=lookup(attrs, "AliasFor") or alias_match.group('target'),
            usage=lookup(attrs, "Usage"),
            radix=lookup(attrs, "Radix"),
            external_access=lookup(attrs, "ExternalAccess"),
        )

    parts = _split_name_and_rest(s)
    if parts is None:
        return None
    name, rest = parts

    data_type, after_type = _split_type(rest)
    data_type, dimensions = _split_dimensions(data_type)
    attrs, after_type = split_attribute_group(after_type)

    value = None
    if after_type.startswith(':='):
        value = after_type[2:].strip()

    return Tag(
        name=name,
        data_type=data_type or "Unknown",
        scope=scope,
        description=lookup(attrs, "Description"),
        value=value,
        alias_for=lookup(attrs, "AliasFor"),
        usage=lookup(attrs, "Usage"),
        radix=lookup(attrs, "Radix"),
        external_access=lookup(attrs, "ExternalAccess"),
        dimensions=dimensions or lookup(attrs, "Dimension"),
    )


def _assigned_value(text: str) -> Optional[str]:
    if text.startswith(':='):
        return text[2:].strip() or None
    return None


def _typed_declaration(decl: str) -> Optional[Tuple[str, str, Dict[str, str], Optional[str]]]:
    """Common ``name : type (attrs) := value`` split for parameters and local tags."""
    s = _strip_terminator(decl)
    if not s:
        return None
    parts = _split_name_and_rest(s)
    if parts is None:
        return None
    name, rest = parts

    data_type, after_type = _split_type(rest)
    attrs, after_attrs = split_attribute_group(after_type)
    return name, data_type, attrs, _assigned_value(after_attrs)


def parse_parameter_declaration(decl: str) -> Optional[AOIParameter]:
    """Parse an AOI parameter such as ``In1 : REAL (Usage := Input, Required := Yes);``."""
    parsed = _typed_declaration(decl)
    if parsed is None:
        return None
    name, data_type, attrs, value = parsed

    usage = lookup(attrs, "Usage") or "Input"
    return AOIParameter(
        name=name,
        data_type=data_type or "Unknown",
        usage=usage,
        required=flag(attrs, "Required"),
        visible=flag(attrs, "Visible", default=True),
        external_access=lookup(attrs, "ExternalAccess"),
        description=lookup(attrs, "Description"),
        default_value=lookup(attrs, "DefaultValue") or lookup(attrs, "DefaultData") or value,
    )


def parse_local_tag_declaration(decl: str) -> Optional[AOILocalTag]:
    """Parse an AOI local tag declaration."""
    parsed = _typed_declaration(decl)
    if parsed is None:
        return None
    name, data_type, attrs, _ = parsed
    return AOILocalTag(
        name=name,
        data_type=data_type or "Unknown",
        radix=lookup(attrs, "Radix"),
        external_access=lookup(attrs, "ExternalAccess"),
        description=lookup(attrs, "Description"),
    )


def _member_from_attrs(name: str, data_type: str, dimension: Optional[str],
                       attrs: Dict[str, str]) -> Optional[UDTMember]:
    if flag(attrs, "Hidden"):
        logger.debug(f"Skipping hidden UDT member {name}")
        return None
    if dimension == "0":
        dimension = None
    return UDTMember(
        name=name,
        data_type=data_type or "Unknown",
        dimension=dimension,
        radix=lookup(attrs, "Radix"),
        external_access=lookup(attrs, "ExternalAccess"),
        description=lookup(attrs, "Description"),
    )


def parse_member_statement(statement: str) -> Optional[UDTMember]:
    """
    Parse one UDT member statement.

    Accepts ``MEMBER Name (DataType := DINT, ...)``, the export's native
    type-first ``DINT Name[4] (Radix := Decimal)`` and the bit overlay form
    ``BIT Name HostWord : 3 (...)``. Hidden backing members are skipped.
    """
    s = _strip_terminator(statement)
    if not s:
        return None

    match = RE_MEMBER_KEYWORD.match(s)
    if match:
        attrs, _ = split_attribute_group(match.group('rest'))
        return _member_from_attrs(
            match.group('name'),
            lookup(attrs, "DataType") or "Unknown",
            lookup(attrs, "Dimension"),
            attrs,
        )

    match = RE_MEMBER_BIT.match(s)
    if match:
        attrs, _ = split_attribute_group(match.group('rest'))
        return _member_from_attrs(match.group('name'), "BIT", None, attrs)

    match = RE_MEMBER_TYPEFIRST.match(s)
    if match:
        attrs, _ = split_attribute_group(match.group('rest'))
        dims = match.group('dims')
        return _member_from_attrs(
            match.group('name'),
            match.group('dtype'),
            dims.replace(" ", "") if dims else lookup(attrs, "Dimension"),
            attrs,
        )

    logger.debug(f"Unrecognized UDT member statement: {s[:60]!r}")
    return None


def _member_complete(statement: str) -> bool:
    if statement.endswith(';'):
        return True
    if not statement.startswith("MEMBER"):
        return False
    # MEMBER lines are not always ';'-terminated; a closed attribute group ends them
    paren = find_unquoted_char(statement, '(')
    return paren != -1 and find_matching_paren(statement, paren) != -1


def parse_datatype_members(datatype_block: str) -> List[UDTMember]:
    """Parse every member of a DATATYPE block, in declaration order."""
    members: List[UDTMember] = []
    current = ""
    for line in block_body(datatype_block, "DATATYPE").splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        current = f"{current} {trimmed}" if current else trimmed
        if _member_complete(current):
            member = parse_member_statement(current)
            if member:
                members.append(member)
            current = ""
    return members
