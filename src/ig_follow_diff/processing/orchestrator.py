"""Batch extraction across many archive entries.

Entries are processed one at a time. A failing entry is recorded in the
batch report and contributes nothing; it never stops the batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from ..errors import UnsupportedFormatError, FileProcessingError, classify_error
from .archive import ExportArchive
from .format_detection import FormatTag, detect_format
from .parsers import STRATEGIES

logger = logging.getLogger(__name__)

T = TypeVar("T")


def remove_duplicates(items: Iterable[T]) -> List[T]:
    """Unique items in first-occurrence order."""
    return list(dict.fromkeys(items))


@dataclass
class FileResult:
    """Outcome of extracting one entry."""

    path: str
    format: FormatTag
    usernames: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_category: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "path": self.path,
            "format": self.format.value,
            "count": len(self.usernames),
        }
        if not self.ok:
            data["error"] = self.error
            data["error_category"] = self.error_category
        return data


@dataclass
class BatchResult:
    """Merged usernames plus the per-entry report."""

    usernames: List[str] = field(default_factory=list)
    files: List[FileResult] = field(default_factory=list)

    @property
    def failures(self) -> List[FileResult]:
        return [result for result in self.files if not result.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self.usernames),
            "files": [result.to_dict() for result in self.files],
        }


async def load_and_parse_file(archive: ExportArchive, entry_path: str) -> FileResult:
    """
    Detect the format of one entry and run the matching strategy.

    Never raises for entry-level problems; they are captured in the result.
    """
    fmt = FormatTag.UNKNOWN

    try:
        fmt = await detect_format(archive, entry_path)
        strategy = STRATEGIES.get(fmt)
        if strategy is None:
            raise UnsupportedFormatError(
                f"Unknown file format for: {entry_path}",
                path=entry_path,
                format=fmt.value,
            )
        usernames = await strategy.extract(archive, entry_path)
    except FileProcessingError as e:
        return _failed(entry_path, fmt, e)
    except Exception as e:
        # Parser internals may raise anything; one bad entry must not end the batch
        return _failed(entry_path, fmt, e, exc_info=True)

    logger.debug(f"Extracted {len(usernames)} username(s) from {entry_path} ({fmt.value})")
    return FileResult(path=entry_path, format=fmt, usernames=usernames)


def _failed(entry_path: str, fmt: FormatTag, error: Exception, exc_info: bool = False) -> FileResult:
    category = classify_error(error)
    logger.warning(
        f"Skipping {entry_path}: {error}",
        exc_info=exc_info,
        extra={
            "extra_fields": {
                "path": entry_path,
                "format": fmt.value,
                "error_type": type(error).__name__,
                "error_category": category,
            }
        },
    )
    return FileResult(
        path=entry_path,
        format=fmt,
        error=str(error),
        error_category=category,
    )


async def extract_all(archive: ExportArchive, entry_paths: Sequence[str]) -> BatchResult:
    """
    Extract usernames from every entry, strictly in order.

    Args:
        archive: Archive holding the entries
        entry_paths: Entries to process

    Returns:
        Unique usernames in first-occurrence order, with a per-entry report
    """
    collected: List[str] = []
    files: List[FileResult] = []

    for entry_path in entry_paths:
        result = await load_and_parse_file(archive, entry_path)
        files.append(result)
        collected.extend(result.usernames)

    batch = BatchResult(usernames=remove_duplicates(collected), files=files)

    if batch.failures:
        logger.warning(
            f"{len(batch.failures)} of {len(files)} file(s) could not be processed"
        )
    return batch


async def load_and_parse_files(archive: ExportArchive, entry_paths: Sequence[str]) -> List[str]:
    """Merged unique usernames from all entries."""
    batch = await extract_all(archive, entry_paths)
    return batch.usernames
