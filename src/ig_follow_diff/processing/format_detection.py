"""Content format detection for archive entries.

The file extension is trusted when it is one we recognise. Anything else
is sniffed from the content: markup starts with ``<``, JSON parses, and
whatever is left is treated as plain text.
"""

import json
import logging
from enum import Enum

from ..errors import ReadError
from .archive import ExportArchive

logger = logging.getLogger(__name__)

# Format cues appear early; longer prefixes buy nothing
SNIFF_PREFIX_CHARS = 500


def reject_constant(name: str):
    """Refuse NaN and Infinity, which are not valid JSON."""
    raise ValueError(f"Invalid JSON constant: {name}")


class FormatTag(str, Enum):
    """Detected content format of an archive entry."""

    HTML = "html"
    JSON = "json"
    XML = "xml"
    TEXT = "text"
    UNKNOWN = "unknown"


KNOWN_EXTENSIONS = {
    "html": FormatTag.HTML,
    "htm": FormatTag.HTML,
    "json": FormatTag.JSON,
    "xml": FormatTag.XML,
    "txt": FormatTag.TEXT,
}


def extension_of(entry_path: str) -> str:
    """Lowercase text after the last '.', or empty string if there is none."""
    _, dot, tail = entry_path.rpartition(".")
    if not dot:
        return ""
    return tail.lower()


def sniff_format(content: str) -> FormatTag:
    """Infer the format of already-read content."""
    snippet = content.strip()[:SNIFF_PREFIX_CHARS]

    if snippet.startswith("<"):
        if "<html" in snippet or "<!DOCTYPE html" in snippet:
            return FormatTag.HTML
        return FormatTag.XML

    try:
        json.loads(content, parse_constant=reject_constant)
    except (ValueError, RecursionError):
        return FormatTag.TEXT
    return FormatTag.JSON


async def detect_format(archive: ExportArchive, entry_path: str) -> FormatTag:
    """
    Detect the content format of an archive entry.

    Args:
        archive: Archive holding the entry
        entry_path: Path of the entry inside the archive

    Returns:
        Detected format; UNKNOWN if the entry cannot be read
    """
    tag = KNOWN_EXTENSIONS.get(extension_of(entry_path))
    if tag is not None:
        return tag

    try:
        content = await archive.read_entry_text(entry_path)
    except ReadError as e:
        logger.warning(
            f"Unable to read {entry_path} to detect format: {e}",
            extra={"extra_fields": {"path": entry_path, **e.context}},
        )
        return FormatTag.UNKNOWN

    tag = sniff_format(content)
    logger.debug(f"Sniffed format {tag.value} for {entry_path}")
    return tag
