"""Format detection, extraction and comparison of Instagram exports."""

from .archive import ExportArchive, ZipExportArchive, DirectoryExportArchive, open_archive
from .format_detection import FormatTag, detect_format
from .parsers import STRATEGIES, JsonShape, parse_html, parse_json, parse_xml, parse_text
from .locator import PathPatterns, LocatedFiles, locate
from .orchestrator import (
    FileResult,
    BatchResult,
    extract_all,
    load_and_parse_file,
    load_and_parse_files,
    remove_duplicates,
)
from .comparator import RelationshipPartitions, compare
from .analyzer import AnalysisResult, analyze_archive

__all__ = [
    "ExportArchive",
    "ZipExportArchive",
    "DirectoryExportArchive",
    "open_archive",
    "FormatTag",
    "detect_format",
    "STRATEGIES",
    "JsonShape",
    "parse_html",
    "parse_json",
    "parse_xml",
    "parse_text",
    "PathPatterns",
    "LocatedFiles",
    "locate",
    "FileResult",
    "BatchResult",
    "extract_all",
    "load_and_parse_file",
    "load_and_parse_files",
    "remove_duplicates",
    "RelationshipPartitions",
    "compare",
    "AnalysisResult",
    "analyze_archive",
]
