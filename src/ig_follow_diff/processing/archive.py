"""Read-only access to Instagram export archives.

An export arrives either as the ZIP file Instagram hands out or as a
folder the user already unpacked. Both expose the same small surface:
list entry paths, read one entry as text.
"""

import io
import logging
import zipfile
import zlib
from pathlib import Path
from typing import List, Protocol, runtime_checkable

import aiofiles

from ..errors import ArchiveError, ReadError

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8-sig"


@runtime_checkable
class ExportArchive(Protocol):
    """Entry listing and text access for an export."""

    name: str

    def list_entry_paths(self) -> List[str]:
        ...

    async def read_entry_text(self, path: str) -> str:
        ...

    def close(self) -> None:
        ...


def _decode(data: bytes, path: str) -> str:
    try:
        return data.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        raise ReadError(
            f"Entry is not valid UTF-8 text: {path}",
            path=path,
        ) from e


class ZipExportArchive:
    """Export held in memory as a ZIP archive."""

    def __init__(self, zip_file: zipfile.ZipFile, name: str = "<memory>") -> None:
        self.name = name
        self._zip = zip_file
        # Directory entries carry no content
        self._entries = [info.filename for info in zip_file.infolist() if not info.is_dir()]

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "<memory>") -> "ZipExportArchive":
        """Open a ZIP archive from raw bytes.

        Raises:
            ArchiveError: If the bytes are not a readable ZIP archive
        """
        try:
            zip_file = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            raise ArchiveError(f"Not a readable ZIP archive: {name}", archive=name) from e

        return cls(zip_file, name=name)

    def list_entry_paths(self) -> List[str]:
        return list(self._entries)

    async def read_entry_text(self, path: str) -> str:
        try:
            data = self._zip.read(path)
        except KeyError as e:
            raise ReadError(f"Entry not found in archive: {path}", path=path) from e
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError, OSError) as e:
            raise ReadError(f"Cannot read entry {path}: {e}", path=path) from e

        return _decode(data, path)

    def close(self) -> None:
        self._zip.close()


class DirectoryExportArchive:
    """Export that was already extracted to a folder."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.name = str(self.root)

    def list_entry_paths(self) -> List[str]:
        return sorted(
            path.relative_to(self.root).as_posix()
            for path in self.root.rglob("*")
            if path.is_file()
        )

    def _resolve(self, path: str) -> Path:
        candidate = (self.root / path).resolve()
        root = self.root.resolve()
        if root != candidate and root not in candidate.parents:
            raise ReadError(f"Entry escapes export directory: {path}", path=path)
        return candidate

    async def read_entry_text(self, path: str) -> str:
        file_path = self._resolve(path)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                data = await f.read()
        except OSError as e:
            raise ReadError(f"Cannot read entry {path}: {e}", path=path) from e

        return _decode(data, path)

    def close(self) -> None:
        pass


async def open_archive(path: Path) -> ExportArchive:
    """
    Open an export from a ZIP file or an extracted directory.

    Args:
        path: ZIP file or directory

    Returns:
        Archive ready for listing and reading

    Raises:
        ArchiveError: If the path does not exist or is not a readable ZIP
    """
    path = Path(path)

    if path.is_dir():
        logger.debug(f"Opening export directory {path}")
        return DirectoryExportArchive(path)

    if not path.exists():
        raise ArchiveError(f"Archive not found: {path}", archive=str(path))

    try:
        async with aiofiles.open(path, "rb") as f:
            data = await f.read()
    except OSError as e:
        raise ArchiveError(f"Cannot read archive {path}: {e}", archive=str(path)) from e

    archive = ZipExportArchive.from_bytes(data, name=path.name)
    logger.info(
        f"Opened archive {path.name} with {len(archive.list_entry_paths())} entries",
        extra={"extra_fields": {"archive": path.name, "size_bytes": len(data)}},
    )
    return archive
