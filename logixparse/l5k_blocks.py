"""
Low-level scanning helpers for the L5K block grammar.

The L5K export nests ``KEYWORD ... END_KEYWORD`` blocks to arbitrary depth and
attaches ``(Key := Value, ...)`` attribute groups to block headers and
declarations. Nesting is tracked with explicit cursor/depth loops because a
regular expression cannot balance same-keyword blocks.
"""

import re
import logging
from typing import Dict, Iterator, List, NamedTuple, Tuple

logger = logging.getLogger(__name__)

_WHITESPACE = " \t\r\n"

# L5K string escapes ($N newline, $$ dollar, ...)
_L5K_ESCAPES = {
    'N': '\n',
    'n': '\n',
    'L': '\n',
    'l': '\n',
    'R': '\r',
    'r': '\r',
    'T': '\t',
    't': '\t',
    '$': '$',
    "'": "'",
    '"': '"',
}


class BlockHeader(NamedTuple):
    """Name token and raw attribute text of a block's opening line."""
    name: str
    attr_string: str


def _keyword_pattern(keyword: str) -> "re.Pattern[str]":
    return re.compile(r'\b' + re.escape(keyword) + r'\b')


def _next_open(pattern: "re.Pattern[str]", text: str, pos: int) -> int:
    """Offset of the next keyword occurrence at or after pos that is not an END_ marker."""
    while True:
        match = pattern.search(text, pos)
        if match is None:
            return -1
        start = match.start()
        if start < 4 or text[start - 4:start] != "END_":
            return start
        pos = match.end()


def iter_block_spans(text: str, keyword: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (start, end) offsets of every outermost KEYWORD ... END_KEYWORD block.

    Nested same-keyword blocks are folded into their parent span. An opening
    keyword with no matching END_ before the end of text yields nothing.

    Args:
        text: Text to scan
        keyword: Block keyword, e.g. ``PROGRAM``

    Yields:
        Tuples of (start offset, end offset) with the END_ marker included
    """
    open_pattern = _keyword_pattern(keyword)
    end_pattern = _keyword_pattern(f"END_{keyword}")
    cursor = 0

    while True:
        start = _next_open(open_pattern, text, cursor)
        if start == -1:
            return

        depth = 1
        pos = start + len(keyword)
        end = -1
        while depth > 0:
            end_match = end_pattern.search(text, pos)
            if end_match is None:
                break
            nested = _next_open(open_pattern, text, pos)
            if nested != -1 and nested < end_match.start():
                depth += 1
                pos = nested + len(keyword)
            else:
                depth -= 1
                pos = end_match.end()
                if depth == 0:
                    end = pos

        if end == -1:
            logger.debug(f"Skipping unterminated {keyword} block at offset {start}")
            cursor = start + len(keyword)
        else:
            yield start, end
            cursor = end


def extract_blocks(text: str, keyword: str) -> List[str]:
    """Return the full text of each outermost KEYWORD block, in source order."""
    return [text[start:end] for start, end in iter_block_spans(text, keyword)]


def find_matching_paren(s: str, open_pos: int) -> int:
    """
    Return the index of the ')' closing the '(' at open_pos, or -1.

    Parentheses inside double-quoted strings are ignored; a backslash inside a
    string skips the next character.
    """
    depth = 0
    in_quote = False
    pos = open_pos
    while pos < len(s):
        ch = s[pos]
        if in_quote:
            if ch == '"':
                in_quote = False
            elif ch == '\\':
                pos += 1
        elif ch == '"':
            in_quote = True
        elif ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def find_unquoted_char(s: str, target: str) -> int:
    """Index of the first target character outside double-quoted strings, or -1."""
    in_quote = False
    pos = 0
    while pos < len(s):
        ch = s[pos]
        if in_quote:
            if ch == '"':
                in_quote = False
            elif ch == '\\':
                pos += 1
        elif ch == '"':
            in_quote = True
        elif ch == target:
            return pos
        pos += 1
    return -1


def _read_quoted(s: str, pos: int) -> Tuple[str, int]:
    """Read a quoted value starting after its opening quote; returns (value, next pos)."""
    chars = []
    while pos < len(s):
        ch = s[pos]
        if ch == '"':
            if pos + 1 < len(s) and s[pos + 1] == '"':
                chars.append('"')
                pos += 2
                continue
            return "".join(chars), pos + 1
        if ch == '\\' and pos + 1 < len(s) and s[pos + 1] == '"':
            chars.append('"')
            pos += 2
            continue
        chars.append(ch)
        pos += 1
    return "".join(chars), pos


def _read_unquoted(s: str, pos: int) -> Tuple[str, int]:
    """Read an unquoted value up to the next top-level comma or unbalanced ')'."""
    depth = 0
    start = pos
    while pos < len(s):
        ch = s[pos]
        if ch == '(':
            depth += 1
        elif ch == ')':
            if depth == 0:
                break
            depth -= 1
        elif ch == ',' and depth == 0:
            break
        pos += 1
    return s[start:pos].strip(), pos


def parse_attributes(attr_string: str) -> Dict[str, str]:
    """
    Parse ``Key := Value, Key := "quoted value", ...`` into a dict.

    Outer parentheses are accepted. Values are always returned as strings;
    callers coerce numbers and booleans themselves.

    Args:
        attr_string: Attribute list, with or without its surrounding parens

    Returns:
        Mapping of attribute name to raw value, in declaration order
    """
    attrs: Dict[str, str] = {}
    if not attr_string:
        return attrs

    s = attr_string.strip()
    if s.startswith('(') and find_matching_paren(s, 0) == len(s) - 1:
        s = s[1:-1]

    pos = 0
    while pos < len(s):
        while pos < len(s) and (s[pos] in _WHITESPACE or s[pos] == ','):
            pos += 1
        if pos >= len(s):
            break

        assign = s.find(':=', pos)
        if assign == -1:
            break
        key = s[pos:assign].strip()
        pos = assign + 2
        while pos < len(s) and s[pos] in " \t":
            pos += 1

        if pos < len(s) and s[pos] == '"':
            value, pos = _read_quoted(s, pos + 1)
            # anything between the closing quote and the next separator is noise
            _, pos = _read_unquoted(s, pos)
        else:
            value, pos = _read_unquoted(s, pos)

        if pos < len(s) and s[pos] == ')':
            pos += 1
        if key:
            attrs[key] = value

    return attrs


def parse_block_header(block_text: str, keyword: str) -> BlockHeader:
    """
    Extract the name and attribute text from a block's opening line.

    ``CONTROLLER MyCtrl (ProcessorType := "1756-L75", Major := 32)`` gives
    ``BlockHeader("MyCtrl", 'ProcessorType := "1756-L75", Major := 32')``.
    The attribute group must directly follow the name; its closing paren is
    found by depth tracking so nested parens and quoted ')' are kept.
    """
    keyword_idx = block_text.find(keyword)
    if keyword_idx == -1:
        return BlockHeader("", "")

    after_keyword = block_text[keyword_idx + len(keyword):].lstrip()
    name_match = re.match(r'[^\s(]+', after_keyword)
    name = name_match.group(0) if name_match else ""

    after_name = after_keyword[len(name):]
    stripped = after_name.lstrip()
    if not stripped.startswith('('):
        return BlockHeader(name, "")

    paren_start = len(after_name) - len(stripped)
    paren_end = find_matching_paren(after_name, paren_start)
    if paren_end == -1:
        return BlockHeader(name, after_name[paren_start + 1:])
    return BlockHeader(name, after_name[paren_start + 1:paren_end])


def block_body(block_text: str, keyword: str, named: bool = True) -> str:
    """
    Return the text between a block's header and its END_ marker.

    For named blocks the header is the keyword, the name token and an optional
    attribute group (which may span several lines). Unnamed blocks such as
    ``TAG`` or ``PARAMETERS`` only drop the keyword itself.
    """
    keyword_idx = block_text.find(keyword)
    pos = 0 if keyword_idx == -1 else keyword_idx + len(keyword)

    if named:
        while pos < len(block_text) and block_text[pos] in _WHITESPACE:
            pos += 1
        name_match = re.compile(r'[^\s(]+').match(block_text, pos)
        if name_match:
            pos = name_match.end()
        probe = pos
        while probe < len(block_text) and block_text[probe] in _WHITESPACE:
            probe += 1
        if probe < len(block_text) and block_text[probe] == '(':
            close = find_matching_paren(block_text, probe)
            if close != -1:
                pos = close + 1

    end = block_text.rfind(f"END_{keyword}")
    if end < pos:
        end = len(block_text)
    return block_text[pos:end]


def split_attribute_group(text: str) -> Tuple[Dict[str, str], str]:
    """
    Split a leading ``(...)`` group off text.

    Returns the parsed attributes and the text after the group. Text that does
    not start with '(' or whose group never closes is returned unchanged with
    no attributes.
    """
    if not text.startswith('('):
        return {}, text
    close = find_matching_paren(text, 0)
    if close == -1:
        return {}, text
    return parse_attributes(text[:close + 1]), text[close + 1:].strip()


def decode_l5k_string(value: str) -> str:
    """Strip surrounding quotes from an L5K string literal and expand $ escapes."""
    s = value.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ('"', "'"):
        s = s[1:-1]

    out = []
    pos = 0
    while pos < len(s):
        ch = s[pos]
        if ch == '$' and pos + 1 < len(s) and s[pos + 1] in _L5K_ESCAPES:
            out.append(_L5K_ESCAPES[s[pos + 1]])
            pos += 2
            continue
        out.append(ch)
        pos += 1
    return "".join(out)
