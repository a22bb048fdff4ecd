"""Comparison of the following and followers lists."""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Sequence


@dataclass(frozen=True)
class RelationshipPartitions:
    """Who you follow, who follows you, and who does both."""

    only_following: List[str] = field(default_factory=list)
    mutual: List[str] = field(default_factory=list)
    only_followers: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return asdict(self)


def compare(following: Sequence[str], followers: Sequence[str]) -> RelationshipPartitions:
    """
    Partition two username lists.

    Inputs are expected to be free of duplicates already. Order of
    ``following`` is kept for ``only_following`` and ``mutual``, order of
    ``followers`` for ``only_followers``.
    """
    following_set = set(following)
    followers_set = set(followers)

    return RelationshipPartitions(
        only_following=[user for user in following if user not in followers_set],
        mutual=[user for user in following if user in followers_set],
        only_followers=[user for user in followers if user not in following_set],
    )
