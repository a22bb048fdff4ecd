"""End-to-end tests for archive analysis."""

import pytest

from ig_follow_diff.errors import ConfigurationError
from ig_follow_diff.processing import DirectoryExportArchive, PathPatterns, analyze_archive


class TestAnalyzeArchive:
    """Test the full pipeline over realistic exports."""

    @pytest.mark.asyncio
    async def test_zip_export(self, zip_archive_factory, export_entries, patterns):
        archive = zip_archive_factory(export_entries)

        result = await analyze_archive(archive, patterns)

        assert result.following.usernames == ["alice", "bob", "carol"]
        assert result.followers.usernames == ["bob", "carol", "dave", "erin"]
        assert result.partitions.only_following == ["alice"]
        assert result.partitions.mutual == ["bob", "carol"]
        assert result.partitions.only_followers == ["dave", "erin"]

    @pytest.mark.asyncio
    async def test_directory_export_matches_zip(self, tmp_path, zip_archive_factory, export_entries, patterns):
        for path, content in export_entries.items():
            target = tmp_path / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")

        from_dir = await analyze_archive(DirectoryExportArchive(tmp_path), patterns)
        from_zip = await analyze_archive(zip_archive_factory(export_entries), patterns)

        assert from_dir.partitions == from_zip.partitions

    @pytest.mark.asyncio
    async def test_html_export(self, zip_archive_factory, patterns):
        archive = zip_archive_factory({
            "connections/followers_and_following/following.html":
                "<html><body><a href='#'>alice</a><a href='#'>bob</a></body></html>",
            "connections/followers_and_following/followers_1.html":
                "<html><body><div><a href='#'>bob</a></div><div><a href='#'>carol</a></div></body></html>",
        })

        result = await analyze_archive(archive, patterns)

        assert result.partitions.only_following == ["alice"]
        assert result.partitions.mutual == ["bob"]
        assert result.partitions.only_followers == ["carol"]

    @pytest.mark.asyncio
    async def test_report_lists_failed_files(self, zip_archive_factory, export_entries, patterns):
        export_entries["connections/followers_and_following/followers_3.json"] = "{broken"
        archive = zip_archive_factory(export_entries)

        report = (await analyze_archive(archive, patterns)).to_dict()

        assert report["archive"] == "export.zip"
        assert report["summary"]["failed_files"] == 1
        assert report["summary"]["mutual"] == 2
        failed = [f for f in report["files"]["followers"] if "error" in f]
        assert failed[0]["path"].endswith("followers_3.json")

    @pytest.mark.asyncio
    async def test_export_without_relationship_files(self, zip_archive_factory, patterns):
        archive = zip_archive_factory({"media/posts/1.jpg": "x"})

        result = await analyze_archive(archive, patterns)

        assert result.partitions.to_dict() == {"only_following": [], "mutual": [], "only_followers": []}

    @pytest.mark.asyncio
    async def test_missing_patterns(self, zip_archive_factory, export_entries):
        with pytest.raises(ConfigurationError):
            await analyze_archive(zip_archive_factory(export_entries), PathPatterns())
