"""
Tag reference extraction and usage classification for ladder rung text.

Both work lexically on neutral rung text such as ``XIC(Start)OTE(Motor1)``:
identifier-like tokens that are not instruction mnemonics are taken as tag
references, and fixed positional patterns decide whether a rung reads or
writes each of them. Tag names that collide with a mnemonic cannot be
represented.
"""

import re
import logging
from functools import lru_cache
from typing import FrozenSet, List, Optional, Tuple

from ordered_set import OrderedSet

from .models import Rung, TagReference, UsageType

logger = logging.getLogger(__name__)

INSTRUCTION_MNEMONICS: FrozenSet[str] = frozenset({
    # bit conditions
    "XIC", "XIO", "ONS", "OSR", "OSF",
    # bit outputs
    "OTE", "OTL", "OTU",
    # timers and counters
    "TON", "TOF", "RTO", "TONR", "TOFR", "RTOR", "CTU", "CTD", "CTUD", "RES",
    # math
    "ADD", "SUB", "MUL", "DIV", "MOD", "SQR", "SQRT", "NEG", "ABS", "CPT",
    "XPY", "SIN", "COS", "TAN", "ASN", "ACS", "ATN", "LN", "LOG", "DEG", "RAD",
    "TRN", "TOD", "FRD",
    # logical
    "AND", "OR", "XOR", "NOT", "BAND", "BOR", "BXOR", "BNOT",
    # move and copy
    "MOV", "MVM", "BTD", "COP", "CPS", "FLL", "CLR", "SWPB",
    # compare
    "EQU", "NEQ", "LES", "LEQ", "GRT", "GEQ", "LIM", "MEQ", "CMP",
    # program control
    "JSR", "SBR", "RET", "JMP", "LBL", "MCR", "AFI", "NOP", "TND", "UID", "UIE",
    "EVENT", "FOR", "BRK",
    # array, shift and sequencer
    "FAL", "FSC", "AVE", "SRT", "STD", "SIZE", "BSL", "BSR", "FFL", "FFU",
    "LFL", "LFU", "SQO", "SQI", "SQL",
    # messaging and system
    "MSG", "GSV", "SSV",
    # process
    "PID", "SCL", "SCP",
})

# identifier with chainable .member and [index] suffixes; not glued to a
# number, a member access or a radix prefix (16#FF)
RE_TAG_TOKEN = re.compile(
    r'(?<![\w.#])[A-Za-z_]\w*(?:\.\w+|\[[^\[\]]*\])*'
)

_OPERAND = r'(?:[^,()\[\]]|\[[^\[\]]*\])+'

# {tag} is replaced with the escaped tag name and its boundary guards
WRITE_PATTERNS: Tuple[str, ...] = (
    # set / latch / unlatch outputs
    r'\b(?:OTE|OTL|OTU)\(\s*{tag}\s*\)',
    # move destination
    r'\bMOV\(' + _OPERAND + r',\s*{tag}\s*\)',
    # two-source arithmetic and logical destination
    r'\b(?:ADD|SUB|MUL|DIV|MOD|XPY|AND|OR|XOR|BAND|BOR|BXOR)\(' + _OPERAND + r',' + _OPERAND + r',\s*{tag}\s*\)',
    # single-source math destination
    r'\b(?:SQR|SQRT|NEG|ABS|NOT|BNOT|SIN|COS|TAN|ASN|ACS|ATN|LN|LOG|DEG|RAD|TRN|TOD|FRD)\(' + _OPERAND + r',\s*{tag}\s*[,)]',
    # byte swap: source, order mode, destination
    r'\bSWPB\(' + _OPERAND + r',' + _OPERAND + r',\s*{tag}\s*\)',
    # compute destination is the first operand
    r'\bCPT\(\s*{tag}\s*,',
    # masked move destination
    r'\bMVM\(' + _OPERAND + r',' + _OPERAND + r',\s*{tag}\s*\)',
    # copy / fill destination
    r'\b(?:COP|CPS)\(' + _OPERAND + r',\s*{tag}\s*,',
    r'\bFLL\(' + _OPERAND + r',\s*{tag}\s*,',
    # clear
    r'\bCLR\(\s*{tag}\s*\)',
)

READ_PATTERNS: Tuple[str, ...] = (
    # examine bit
    r'\b(?:XIC|XIO)\(\s*{tag}\s*\)',
    # two-operand compares, either side
    r'\b(?:EQU|NEQ|LES|LEQ|GRT|GEQ)\(\s*{tag}\s*,',
    r'\b(?:EQU|NEQ|LES|LEQ|GRT|GEQ)\(' + _OPERAND + r',\s*{tag}\s*\)',
    # limit test / masked compare, any operand
    r'\b(?:LIM|MEQ)\((?:' + _OPERAND + r',)*\s*{tag}\s*[,)]',
)


def _tag_regex(tag_name: str) -> str:
    return r'(?<![\w.\[])' + re.escape(tag_name) + r'(?![\w.\[])'


@lru_cache(maxsize=1024)
def _compiled_patterns(tag_name: str) -> Tuple[Tuple["re.Pattern[str]", ...], Tuple["re.Pattern[str]", ...]]:
    """Write and read patterns bound to one tag, compiled once per tag name."""
    tag = _tag_regex(tag_name)
    writes = tuple(re.compile(p.replace("{tag}", tag), re.IGNORECASE) for p in WRITE_PATTERNS)
    reads = tuple(re.compile(p.replace("{tag}", tag), re.IGNORECASE) for p in READ_PATTERNS)
    return writes, reads


def is_instruction(token: str) -> bool:
    """True when the token's base name is a known instruction mnemonic."""
    base = re.split(r'[.\[]', token, maxsplit=1)[0]
    return base.upper() in INSTRUCTION_MNEMONICS


def extract_tag_references(rung_text: str) -> List[str]:
    """
    Return candidate tag names in a rung, de-duplicated in first-seen order.

    Logix names are case-insensitive, so ``Start`` and ``start`` are one tag;
    the first spelling is kept.

    Args:
        rung_text: Ladder text with the comment already removed

    Returns:
        Tag names in their full written form (``Motor.Run``, ``Arr[3]``)
    """
    seen = set()
    references = OrderedSet()
    for match in RE_TAG_TOKEN.finditer(rung_text):
        token = match.group(0)
        if is_instruction(token):
            continue
        key = token.upper()
        if key in seen:
            continue
        seen.add(key)
        references.add(token)
    return list(references)


def determine_usage_type(rung_text: str, tag_name: str) -> UsageType:
    """
    Classify how a rung uses one tag.

    Write patterns match the tag as the destination of an output-style
    instruction, read patterns as the operand of a condition or compare.
    Both matching gives BOTH; neither defaults to READ.
    """
    write_patterns, read_patterns = _compiled_patterns(tag_name)
    writes = any(p.search(rung_text) for p in write_patterns)
    reads = any(p.search(rung_text) for p in read_patterns)

    if writes and reads:
        return UsageType.BOTH
    if writes:
        return UsageType.WRITE
    return UsageType.READ


def analyze_rung(number: int, content: str, comment: Optional[str],
                 routine_name: str, program_name: str) -> Tuple[Rung, List[TagReference]]:
    """Build a Rung and its tag references from already-split ladder text."""
    tag_names = extract_tag_references(content)
    references = [
        TagReference(
            tag_name=tag_name,
            routine_name=routine_name,
            program_name=program_name,
            rung_number=number,
            usage_type=determine_usage_type(content, tag_name),
        )
        for tag_name in tag_names
    ]
    rung = Rung(
        number=number,
        routine_name=routine_name,
        program_name=program_name,
        content=content,
        comment=comment,
        tag_references=tag_names,
    )
    return rung, references
