"""
Error types raised by the L5K/L5X parsers.

Only structural failures that make the whole export unusable are raised.
Everything else (missing attributes, empty sections, unterminated sub-blocks)
is resolved by omission while parsing.
"""


class LogixParseError(Exception):
    """Base class for fatal parse errors."""

    kind = "parse_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MissingRootBlockError(LogixParseError):
    """L5K text has no CONTROLLER block."""

    kind = "missing_root_block"


class MissingRootNodeError(LogixParseError):
    """L5X document lacks the RSLogix5000Content root or its Controller node."""

    kind = "missing_root_node"
