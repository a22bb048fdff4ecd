"""End-to-end analysis of one export archive."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from .archive import ExportArchive
from .comparator import RelationshipPartitions, compare
from .locator import LocatedFiles, PathPatterns, locate
from .orchestrator import BatchResult, extract_all

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Located files, both extraction batches, and the partitions."""

    archive: str
    located: LocatedFiles
    following: BatchResult
    followers: BatchResult
    partitions: RelationshipPartitions = field(default_factory=RelationshipPartitions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "archive": self.archive,
            "summary": {
                "following": len(self.following.usernames),
                "followers": len(self.followers.usernames),
                "only_following": len(self.partitions.only_following),
                "mutual": len(self.partitions.mutual),
                "only_followers": len(self.partitions.only_followers),
                "failed_files": len(self.following.failures) + len(self.followers.failures),
            },
            "partitions": self.partitions.to_dict(),
            "files": {
                "following": self.following.to_dict()["files"],
                "followers": self.followers.to_dict()["files"],
            },
        }


async def analyze_archive(archive: ExportArchive, patterns: PathPatterns) -> AnalysisResult:
    """
    Locate relationship files, extract both lists, and compare them.

    Raises:
        ConfigurationError: If a path pattern is missing
    """
    located = locate(archive.list_entry_paths(), patterns)

    if not located.following:
        logger.warning(f"No following files found in {archive.name}")
    if not located.followers:
        logger.warning(f"No followers files found in {archive.name}")

    following = await extract_all(archive, located.following)
    followers = await extract_all(archive, located.followers)

    partitions = compare(following.usernames, followers.usernames)
    logger.info(
        f"Analysis complete: {len(partitions.only_following)} only following, "
        f"{len(partitions.mutual)} mutual, {len(partitions.only_followers)} only followers",
        extra={"extra_fields": {"archive": archive.name}},
    )

    return AnalysisResult(
        archive=archive.name,
        located=located,
        following=following,
        followers=followers,
        partitions=partitions,
    )
