"""
File loading and format dispatch.

This is the only place the package touches the filesystem for input: the
parsers themselves work on text or element trees that are already in memory.
"""

import logging
from pathlib import Path
from typing import Union

from .l5k_parser import parse_l5k
from .l5x_parser import parse_l5x
from .models import ParseResult, SourceFormat

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_text(path: PathLike) -> str:
    """
    Read an export file as text.

    Exports are normally UTF-8 (possibly with a BOM); older RSLogix versions
    write Windows-1252, which is read as latin-1 rather than failing.
    """
    raw = Path(path).read_bytes()
    try:
        return raw.decode('utf-8-sig')
    except UnicodeDecodeError:
        logger.debug(f"{path} is not valid UTF-8, decoding as latin-1")
        return raw.decode('latin-1')


def detect_format(path: PathLike, text: str) -> SourceFormat:
    """
    Decide whether text is an L5K or L5X export.

    The file extension wins; otherwise an XML declaration or an
    ``RSLogix5000Content`` root marks L5X and anything else is treated as L5K.
    """
    suffix = Path(path).suffix.lower()
    if suffix == ".l5x":
        return SourceFormat.L5X
    if suffix == ".l5k":
        return SourceFormat.L5K

    head = text.lstrip()[:512]
    if head.startswith("<?xml") or "<RSLogix5000Content" in head:
        return SourceFormat.L5X
    return SourceFormat.L5K


def parse_file(path: PathLike) -> ParseResult:
    """
    Load and parse an L5K or L5X file.

    Args:
        path: Path to the export file

    Returns:
        ParseResult for the file

    Raises:
        OSError: If the file cannot be read
        LogixParseError: If the file is missing its root block or node
    """
    text = load_text(path)
    source_format = detect_format(path, text)
    logger.info(f"Loading {path} as {source_format.value}")

    if source_format is SourceFormat.L5X:
        return parse_l5x(text)
    return parse_l5k(text)
