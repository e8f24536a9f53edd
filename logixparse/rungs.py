"""
Rung splitting for L5K ladder routines.

Inside a ROUTINE block each rung starts on a line beginning with ``N:``::

    ROUTINE MainRoutine
        RC: "Start the pump";
        N: XIC(Start)OTE(Pump);
        N: [Interlock]XIC(Pump)XIO(Fault)OTE(Run);
    END_ROUTINE

The ``N`` is a marker, not a rung number: rungs are numbered by position.
"""

import re
import logging
from typing import List, NamedTuple, Optional, Tuple

from .l5k_blocks import decode_l5k_string

logger = logging.getLogger(__name__)

RUNG_MARKER = "N:"
RUNG_COMMENT_MARKER = "RC:"
ROUTINE_END = "END_ROUTINE"

# leading [comment], possibly spanning lines
RE_LEADING_COMMENT = re.compile(r'^\[([\s\S]+?)\]\s*')


class RungText(NamedTuple):
    """Raw text of one rung plus any comment given by a preceding RC: line."""
    body: str
    comment: Optional[str] = None


def split_rungs(routine_text: str) -> List[RungText]:
    """
    Split a routine's text into rung bodies.

    Each body is the text after ``N:`` up to the next ``N:``, ``RC:`` or
    ``END_ROUTINE`` line, with its lines trimmed and joined by newlines.

    Args:
        routine_text: Full ROUTINE block or its body

    Returns:
        Rung texts in source order
    """
    sections: List[RungText] = []
    current: Optional[List[str]] = None
    current_comment: Optional[str] = None
    pending_comment: Optional[str] = None
    rc_lines: Optional[List[str]] = None

    def flush() -> None:
        if current:
            sections.append(RungText("\n".join(current), current_comment))

    for line in routine_text.splitlines():
        trimmed = line.strip()

        if rc_lines is not None:
            rc_lines.append(trimmed)
            if trimmed.endswith(';'):
                pending_comment = _rung_comment_text(" ".join(rc_lines))
                rc_lines = None
            continue

        if trimmed.startswith(RUNG_MARKER):
            flush()
            current = [trimmed[len(RUNG_MARKER):]]
            current_comment, pending_comment = pending_comment, None
        elif trimmed.startswith(RUNG_COMMENT_MARKER):
            flush()
            current = None
            rc_text = trimmed[len(RUNG_COMMENT_MARKER):].strip()
            if rc_text.endswith(';'):
                pending_comment = _rung_comment_text(rc_text)
            else:
                rc_lines = [rc_text]
        elif current is not None:
            if trimmed.startswith(ROUTINE_END):
                flush()
                current = None
            else:
                current.append(trimmed)

    flush()
    return sections


def _rung_comment_text(rc_text: str) -> Optional[str]:
    text = rc_text.strip()
    if text.endswith(';'):
        text = text[:-1].strip()
    decoded = decode_l5k_string(text).strip()
    return decoded or None


def split_rung_body(body: str) -> Tuple[Optional[str], str]:
    """
    Separate a rung body into (comment, ladder text).

    A leading ``[...]`` is the comment; a trailing ``;`` is dropped from the
    ladder text.
    """
    text = body.strip()
    comment = None
    match = RE_LEADING_COMMENT.match(text)
    if match:
        comment = match.group(1).strip()
        text = text[match.end():]

    content = text.strip()
    if content.endswith(';'):
        content = content[:-1].strip()
    return comment, content
