# pageimages/services/file_store.py
# Responsibility: Resolves file keys to public URLs and computes thumbnail URLs and dimensions.

import hashlib
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, TypedDict
from urllib.parse import quote

from pageimages.config.settings import settings
from pageimages.services.repository import FileRow, PageImageRepository


class Thumbnail(TypedDict):
    source: str
    width: int
    height: int


@dataclass(frozen=True)
class FileInfo:
    name: str
    width: int
    height: int
    base_url: str

    @property
    def hash_path(self) -> str:
        """Hashed upload directory, e.g. 'a/ab/Name.jpg'."""
        digest = hashlib.md5(self.name.encode("utf-8")).hexdigest()
        return f"{digest[0]}/{digest[:2]}/{quote(self.name)}"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.hash_path}"

    def thumb_url(self, width: int) -> str:
        return f"{self.base_url}/thumb/{self.hash_path}/{width}px-{quote(self.name)}"

    def transform(self, size: int) -> Optional[Thumbnail]:
        """
        Scales the file to fit in a size x size box. Files are never scaled up:
        when no downscale is needed the original is served, and the reported
        dimensions never exceed the original's.
        """
        if self.width <= 0 or self.height <= 0 or size <= 0:
            return None

        scale = min(size / self.width, size / self.height)
        if scale >= 1:
            return Thumbnail(source=self.url, width=self.width, height=self.height)

        thumb_width = max(1, round(self.width * scale))
        thumb_height = max(1, round(self.height * scale))
        return Thumbnail(
            source=self.thumb_url(thumb_width),
            width=min(thumb_width, self.width),
            height=min(thumb_height, self.height),
        )


class FileStore:
    """
    Looks up file metadata for file keys.
    """

    def __init__(self, repository: Optional[PageImageRepository] = None, base_url: Optional[str] = None):
        self.repository = repository or PageImageRepository()
        self.base_url = (base_url or settings.FILES.UPLOAD_BASE_URL).rstrip("/")

    def _to_info(self, row: FileRow) -> FileInfo:
        return FileInfo(
            name=row["name"],
            width=int(row["width"] or 0),
            height=int(row["height"] or 0),
            base_url=self.base_url,
        )

    def find_files(self, names: Iterable[str]) -> Dict[str, FileInfo]:
        return {name: self._to_info(row) for name, row in self.repository.get_files(names).items()}

    def find_file(self, name: str) -> Optional[FileInfo]:
        return self.find_files([name]).get(name)
