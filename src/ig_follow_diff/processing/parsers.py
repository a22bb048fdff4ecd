"""Username extraction strategies, one per content format.

Each strategy reads one archive entry and returns the usernames found in
it. The ``parse_*`` functions hold the actual logic and work on text, so
they can be used without an archive.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Protocol

from bs4 import BeautifulSoup

from ..errors import ParseError
from .archive import ExportArchive
from .format_detection import FormatTag, reject_constant

logger = logging.getLogger(__name__)

FOLLOWING_FIELD = "relationships_following"
STRING_LIST_FIELD = "string_list_data"
VALUE_FIELD = "value"


def _clean(values: Iterable[str]) -> List[str]:
    """Trim values and drop empty ones, keeping order."""
    return [value.strip() for value in values if value and value.strip()]


def parse_html(content: str) -> List[str]:
    """Text of every ``a`` and ``span`` element, in document order."""
    try:
        soup = BeautifulSoup(content, "html.parser")
    except Exception as e:
        raise ParseError(f"Malformed HTML: {e}") from e

    return _clean(el.get_text() for el in soup.find_all(["a", "span"]))


class JsonShape(str, Enum):
    """Known layouts of Instagram relationship exports."""

    FOLLOWING = "following"        # {"relationships_following": [records]}
    FOLLOWERS = "followers"        # [records]
    UNRECOGNIZED = "unrecognized"


def classify_json_shape(data: Any) -> JsonShape:
    if isinstance(data, dict) and isinstance(data.get(FOLLOWING_FIELD), list):
        return JsonShape.FOLLOWING
    if isinstance(data, list):
        return JsonShape.FOLLOWERS
    return JsonShape.UNRECOGNIZED


def _record_values(record: Any) -> List[str]:
    if not isinstance(record, dict):
        return []

    items = record.get(STRING_LIST_FIELD)
    if not isinstance(items, list):
        return []

    values = []
    for item in items:
        if not isinstance(item, dict):
            continue
        value = item.get(VALUE_FIELD)
        if isinstance(value, str) and value.strip():
            values.append(value)
    return values


def extract_json_usernames(data: Any) -> List[str]:
    """Usernames from decoded export JSON, record order then inner order."""
    shape = classify_json_shape(data)

    if shape is JsonShape.FOLLOWING:
        records = data[FOLLOWING_FIELD]
    elif shape is JsonShape.FOLLOWERS:
        records = data
    else:
        logger.debug("JSON content matches no known relationship layout")
        return []

    usernames: List[str] = []
    for record in records:
        usernames.extend(_record_values(record))
    return usernames


def parse_json(content: str) -> List[str]:
    try:
        data = json.loads(content, parse_constant=reject_constant)
    except (ValueError, RecursionError) as e:
        raise ParseError(f"Malformed JSON: {e}") from e

    return extract_json_usernames(data)


def parse_xml(content: str) -> List[str]:
    """Text of ``value`` elements inside ``item`` inside ``string_list_data``."""
    try:
        soup = BeautifulSoup(content, "xml")
    except Exception as e:
        raise ParseError(f"Malformed XML: {e}") from e

    nodes = soup.select(f"{STRING_LIST_FIELD} > item > {VALUE_FIELD}")
    return _clean(node.get_text() for node in nodes)


def parse_text(content: str) -> List[str]:
    """One username per line."""
    return _clean(content.splitlines())


class ExtractionStrategy(Protocol):
    """Extracts usernames from one archive entry."""

    format: FormatTag

    async def extract(self, archive: ExportArchive, entry_path: str) -> List[str]:
        ...


class TextContentStrategy:
    """Reads the entry as text and hands it to a parse function."""

    def __init__(self, format: FormatTag, parse) -> None:
        self.format = format
        self._parse = parse

    async def extract(self, archive: ExportArchive, entry_path: str) -> List[str]:
        content = await archive.read_entry_text(entry_path)
        try:
            return self._parse(content)
        except ParseError as e:
            e.context.setdefault("path", entry_path)
            raise

    def __repr__(self) -> str:
        return f"TextContentStrategy({self.format.value})"


STRATEGIES: Dict[FormatTag, ExtractionStrategy] = {
    FormatTag.HTML: TextContentStrategy(FormatTag.HTML, parse_html),
    FormatTag.JSON: TextContentStrategy(FormatTag.JSON, parse_json),
    FormatTag.XML: TextContentStrategy(FormatTag.XML, parse_xml),
    FormatTag.TEXT: TextContentStrategy(FormatTag.TEXT, parse_text),
}
