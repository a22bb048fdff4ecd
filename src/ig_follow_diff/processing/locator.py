"""Selection of the archive entries that describe relationships."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from ..config.conf_file import compile_regex_literal, load_conf_file
from ..config.schema import LocatorConfig
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

FOLLOWING_PATTERN_KEY = "following_files_path_regex"
FOLLOWERS_PATTERN_KEY = "followers_files_path_regex"

PatternLike = Union[str, "re.Pattern[str]"]


def _as_pattern(key: str, value: Optional[PatternLike]) -> Optional["re.Pattern[str]"]:
    if value is None or isinstance(value, re.Pattern):
        return value

    value = value.strip()
    if not value:
        return None

    compiled = compile_regex_literal(value)
    if compiled is not None:
        return compiled

    # Bare strings are taken as plain patterns without flags
    try:
        return re.compile(value)
    except re.error as e:
        raise ConfigurationError(f"Invalid pattern for {key}: {e}", key=key) from e


@dataclass(frozen=True)
class PathPatterns:
    """The two entry path patterns, fixed for the life of the process."""

    following: Optional["re.Pattern[str]"] = None
    followers: Optional["re.Pattern[str]"] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, PatternLike]) -> "PathPatterns":
        return cls(
            following=_as_pattern(FOLLOWING_PATTERN_KEY, values.get(FOLLOWING_PATTERN_KEY)),
            followers=_as_pattern(FOLLOWERS_PATTERN_KEY, values.get(FOLLOWERS_PATTERN_KEY)),
        )

    @classmethod
    def from_config(cls, config: LocatorConfig) -> "PathPatterns":
        """
        Build patterns from the locator section of the configuration.

        Values set directly in the configuration win over the pattern file.

        Raises:
            ConfigurationError: If either pattern ends up missing or invalid
        """
        values = {}
        if config.patterns_file:
            values.update(load_conf_file(Path(config.patterns_file)))

        for key in (FOLLOWING_PATTERN_KEY, FOLLOWERS_PATTERN_KEY):
            direct = getattr(config, key)
            if direct:
                values[key] = direct

        patterns = cls.from_mapping(values)
        patterns.require()
        return patterns

    def require(self) -> None:
        """Raise ConfigurationError unless both patterns are set."""
        missing = [
            key for key, pattern in (
                (FOLLOWING_PATTERN_KEY, self.following),
                (FOLLOWERS_PATTERN_KEY, self.followers),
            )
            if pattern is None
        ]
        if missing:
            raise ConfigurationError(
                f"Missing path pattern(s): {', '.join(missing)}",
                missing=missing,
            )


@dataclass
class LocatedFiles:
    """Candidate entry paths for each side of the relationship."""

    following: List[str] = field(default_factory=list)
    followers: List[str] = field(default_factory=list)


def locate(entry_paths: Iterable[str], patterns: PathPatterns) -> LocatedFiles:
    """
    Select entries matching the following and followers patterns.

    A path matching both patterns is reported on both sides.

    Args:
        entry_paths: All entry paths in the archive
        patterns: Configured path patterns

    Returns:
        Unique matching paths per side, in first-seen order

    Raises:
        ConfigurationError: If a pattern is not configured
    """
    patterns.require()

    following = {}
    followers = {}

    for path in entry_paths:
        if patterns.following.search(path):
            following.setdefault(path, None)
        if patterns.followers.search(path):
            followers.setdefault(path, None)

    located = LocatedFiles(following=list(following), followers=list(followers))
    logger.info(
        f"Located {len(located.following)} following file(s) "
        f"and {len(located.followers)} followers file(s)"
    )
    return located
