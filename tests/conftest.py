"""Shared fixtures for ig-follow-diff tests."""

import io
import json
import zipfile
from typing import Dict, List, Union

import pytest

from ig_follow_diff.errors import ReadError
from ig_follow_diff.processing import PathPatterns, ZipExportArchive
from ig_follow_diff.config import compile_regex_literal


class FakeArchive:
    """In-memory archive that records which entries were read."""

    def __init__(self, entries: Dict[str, Union[str, Exception]], name: str = "fake") -> None:
        self.name = name
        self.entries = entries
        self.reads: List[str] = []

    def list_entry_paths(self) -> List[str]:
        return list(self.entries)

    async def read_entry_text(self, path: str) -> str:
        self.reads.append(path)
        if path not in self.entries:
            raise ReadError(f"Entry not found in archive: {path}", path=path)
        value = self.entries[path]
        if isinstance(value, Exception):
            raise value
        return value

    def close(self) -> None:
        pass


def build_zip_bytes(entries: Dict[str, Union[str, bytes]]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for path, content in entries.items():
            if isinstance(content, str):
                content = content.encode("utf-8")
            zf.writestr(path, content)
    return buffer.getvalue()


def following_json(*usernames: str) -> str:
    return json.dumps({
        "relationships_following": [
            {"title": "", "string_list_data": [{"href": f"https://www.instagram.com/{u}", "value": u, "timestamp": 1700000000}]}
            for u in usernames
        ]
    })


def followers_json(*usernames: str) -> str:
    return json.dumps([
        {"title": "", "media_list_data": [], "string_list_data": [{"href": f"https://www.instagram.com/{u}", "value": u, "timestamp": 1700000000}]}
        for u in usernames
    ])


FOLLOWING_PATH = "connections/followers_and_following/following.json"
FOLLOWERS_PATH = "connections/followers_and_following/followers_1.json"


@pytest.fixture
def fake_archive_factory():
    """Build a FakeArchive from a dict of entries."""
    return FakeArchive


@pytest.fixture
def zip_archive_factory():
    """Build a ZipExportArchive from a dict of entries."""
    def factory(entries: Dict[str, Union[str, bytes]], name: str = "export.zip") -> ZipExportArchive:
        return ZipExportArchive.from_bytes(build_zip_bytes(entries), name=name)
    return factory


@pytest.fixture
def patterns() -> PathPatterns:
    """Patterns matching the standard export layout."""
    return PathPatterns(
        following=compile_regex_literal(r"/followers_and_following\/following\.(json|html)$/i"),
        followers=compile_regex_literal(r"/followers_and_following\/followers(_\d+)?\.(json|html)$/i"),
    )


@pytest.fixture
def export_entries() -> Dict[str, str]:
    """A small but realistic export."""
    return {
        FOLLOWING_PATH: following_json("alice", "bob", "carol"),
        FOLLOWERS_PATH: followers_json("bob", "carol", "dave"),
        "connections/followers_and_following/followers_2.json": followers_json("erin", "bob"),
        "personal_information/personal_information.json": json.dumps({"profile_user": []}),
        "media/posts/photo.jpg": "not really a jpeg",
    }


@pytest.fixture
def zip_bytes_factory():
    """Build raw ZIP bytes from a dict of entries."""
    return build_zip_bytes
