"""Tests for username extraction strategies."""

import json

import pytest

from ig_follow_diff.errors import ParseError, ReadError
from ig_follow_diff.processing import (
    STRATEGIES, FormatTag, JsonShape, parse_html, parse_json, parse_text, parse_xml,
)
from ig_follow_diff.processing.parsers import classify_json_shape


class TestParseJson:
    """Test both export layouts and unknown shapes."""

    def test_following_layout(self):
        content = '{"relationships_following":[{"string_list_data":[{"value":"alice"}]}]}'
        assert parse_json(content) == ["alice"]

    def test_followers_layout_drops_empty_values(self):
        content = '[{"string_list_data":[{"value":"bob"},{"value":""}]}]'
        assert parse_json(content) == ["bob"]

    def test_unrecognized_layout(self):
        assert parse_json('{"unexpected":true}') == []

    def test_record_then_inner_order(self):
        data = [
            {"string_list_data": [{"value": "a"}, {"value": "b"}]},
            {"string_list_data": [{"value": "c"}]},
        ]
        assert parse_json(json.dumps(data)) == ["a", "b", "c"]

    def test_tolerates_malformed_records(self):
        data = [
            "not a record",
            {"title": "no list"},
            {"string_list_data": "not a list"},
            {"string_list_data": [None, {"href": "no value"}, {"value": 42}, {"value": "   "}]},
            {"string_list_data": [{"value": "kept"}]},
        ]
        assert parse_json(json.dumps(data)) == ["kept"]

    def test_following_field_must_be_a_list(self):
        assert parse_json('{"relationships_following": {"value": "x"}}') == []

    def test_malformed_json(self):
        with pytest.raises(ParseError):
            parse_json('{"relationships_following": [')

    @pytest.mark.parametrize("content", ["NaN", "-Infinity", '[{"string_list_data": [{"value": Infinity}]}]'])
    def test_non_finite_constants_rejected(self, content):
        with pytest.raises(ParseError):
            parse_json(content)

    def test_nesting_too_deep_is_parse_error(self):
        with pytest.raises(ParseError):
            parse_json("[" * 200000)

    @pytest.mark.parametrize("data,shape", [
        ({"relationships_following": []}, JsonShape.FOLLOWING),
        ([], JsonShape.FOLLOWERS),
        ({"relationships_followers": []}, JsonShape.UNRECOGNIZED),
        ("text", JsonShape.UNRECOGNIZED),
        (None, JsonShape.UNRECOGNIZED),
    ])
    def test_classify_json_shape(self, data, shape):
        assert classify_json_shape(data) == shape


class TestParseHtml:
    """Test HTML extraction."""

    def test_anchor_and_span_text_in_document_order(self):
        content = """
        <html><body>
          <div><a href="https://www.instagram.com/alice"> alice </a></div>
          <span>bob</span>
          <p>ignored paragraph</p>
          <a href="#"></a>
          <div><a href="https://www.instagram.com/carol">carol</a><span>   </span></div>
        </body></html>
        """
        assert parse_html(content) == ["alice", "bob", "carol"]

    def test_nested_span_inside_anchor(self):
        assert parse_html("<a><span>dave</span></a>") == ["dave", "dave"]


class TestParseXml:
    """Test XML extraction."""

    def test_values_under_string_list_data_items(self):
        content = """<?xml version="1.0"?>
        <root>
          <string_list_data>
            <item><value> alice </value></item>
            <item><value></value></item>
            <item><value>bob</value></item>
          </string_list_data>
          <other><item><value>not me</value></item></other>
          <string_list_data><value>nor me</value></string_list_data>
        </root>
        """
        assert parse_xml(content) == ["alice", "bob"]

    def test_no_matches(self):
        assert parse_xml("<root/>") == []


class TestParseText:
    """Test plain-text extraction."""

    def test_lines_trimmed_and_empties_dropped(self):
        assert parse_text("alice\n\n  bob  \r\n\t\ncarol") == ["alice", "bob", "carol"]

    def test_bare_carriage_returns_split_lines(self):
        assert parse_text("alice\rbob\r\ncarol") == ["alice", "bob", "carol"]


class TestStrategies:
    """Test the dispatch table."""

    def test_every_concrete_format_has_a_strategy(self):
        assert set(STRATEGIES) == {FormatTag.HTML, FormatTag.JSON, FormatTag.XML, FormatTag.TEXT}
        assert FormatTag.UNKNOWN not in STRATEGIES

    @pytest.mark.asyncio
    async def test_strategy_reads_entry(self, fake_archive_factory):
        archive = fake_archive_factory({"names.txt": "alice\nbob"})
        assert await STRATEGIES[FormatTag.TEXT].extract(archive, "names.txt") == ["alice", "bob"]

    @pytest.mark.asyncio
    async def test_parse_error_carries_path(self, fake_archive_factory):
        archive = fake_archive_factory({"bad.json": "{"})

        with pytest.raises(ParseError) as excinfo:
            await STRATEGIES[FormatTag.JSON].extract(archive, "bad.json")

        assert excinfo.value.context["path"] == "bad.json"

    @pytest.mark.asyncio
    async def test_read_error_propagates(self, fake_archive_factory):
        archive = fake_archive_factory({})
        with pytest.raises(ReadError):
            await STRATEGIES[FormatTag.HTML].extract(archive, "missing.html")
