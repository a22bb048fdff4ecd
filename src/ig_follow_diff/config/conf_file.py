"""Reader for ``key = value`` pattern files.

Pattern files are the plain-text companion of the TOML configuration.
Each line holds one ``key = value`` pair. Keys ending in ``_regex`` may
carry a ``/pattern/flags`` literal that is compiled on load; every other
value is kept as a raw string.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Union

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

REGEX_KEY_SUFFIX = "_regex"

_REGEX_LITERAL = re.compile(r"^/(.*)/([a-z]*)$", re.IGNORECASE)

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}

# Accepted for compatibility with literal syntax elsewhere, no effect here
_IGNORED_FLAGS = frozenset("guy")

ConfValue = Union[str, "re.Pattern[str]"]


def compile_regex_literal(value: str) -> "re.Pattern[str] | None":
    """
    Compile a ``/pattern/flags`` literal.

    Args:
        value: Raw value from a pattern file

    Returns:
        Compiled pattern, or None if value is not a regex literal

    Raises:
        ConfigurationError: If flags are unknown or the pattern is invalid
    """
    match = _REGEX_LITERAL.match(value)
    if not match:
        return None

    pattern, flag_letters = match.group(1), match.group(2)
    flags = 0
    for letter in flag_letters.lower():
        if letter in _FLAG_MAP:
            flags |= _FLAG_MAP[letter]
        elif letter not in _IGNORED_FLAGS:
            raise ConfigurationError(
                f"Unknown regex flag '{letter}' in {value}",
                value=value,
            )

    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ConfigurationError(
            f"Invalid regex {value}: {e}",
            value=value,
        ) from e


def parse_conf_text(text: str) -> Dict[str, ConfValue]:
    """
    Parse the content of a pattern file.

    Blank lines and ``#`` comments are skipped, as are lines that do not
    split into exactly one key and one value on ``=``.

    Args:
        text: File content

    Returns:
        Mapping of key to raw string or compiled pattern
    """
    result: Dict[str, ConfValue] = {}

    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split("=")
        if len(parts) != 2:
            logger.debug(f"Skipping malformed line {line_number}: {line!r}")
            continue

        key = parts[0].strip()
        value = parts[1].strip()

        if key.endswith(REGEX_KEY_SUFFIX):
            compiled = compile_regex_literal(value)
            result[key] = compiled if compiled is not None else value
        else:
            result[key] = value

    return result


def load_conf_file(path: Path) -> Dict[str, ConfValue]:
    """
    Load a pattern file from disk.

    Args:
        path: Path to the ``.conf`` file

    Returns:
        Mapping of key to raw string or compiled pattern

    Raises:
        ConfigurationError: If the file cannot be read or holds an invalid regex
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read pattern file {path}: {e}",
            path=str(path),
        ) from e

    logger.debug(f"Loaded pattern file {path}")
    return parse_conf_text(text)
