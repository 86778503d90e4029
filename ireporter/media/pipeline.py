"""
Media attachments for reports
Validates, classifies and previews user-selected files, then packages them
as multipart parts for report submission.
"""

import asyncio
import base64
import bisect
import itertools
import logging
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ireporter.core.config import settings
from ireporter.core.constants import MEDIA_FIELD_NAME
from ireporter.core.errors import FileTooLarge, TooManyMediaFiles, UnsupportedType

logger = logging.getLogger(__name__)


class MediaKind(Enum):
    """Kind of media, used for preview rendering only."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    UNKNOWN = "unknown"


def classify(content_type: Optional[str]) -> MediaKind:
    """Classify a MIME type into a MediaKind."""
    major = (content_type or "").split("/", 1)[0].strip().lower()
    try:
        return MediaKind(major)
    except ValueError:
        return MediaKind.UNKNOWN


@dataclass
class MediaFile:
    """A file selected by the user, before validation."""
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: Optional[str] = None) -> "MediaFile":
        """
        Load a file from disk.

        Args:
            path: File location
            content_type: Declared MIME type; guessed from the extension if omitted

        Returns:
            MediaFile with the file's bytes
        """
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content_type=content_type, content=path.read_bytes())


@dataclass
class PendingAsset:
    """An accepted media file waiting for submission."""
    file: MediaFile
    preview: str
    kind: MediaKind
    size: int
    sequence: int = field(default=0, repr=False)

    @property
    def filename(self) -> str:
        return self.file.filename

    def to_dict(self) -> Dict[str, object]:
        return {
            "filename": self.file.filename,
            "content_type": self.file.content_type,
            "kind": self.kind.value,
            "size": self.size,
        }


def build_preview(file: MediaFile) -> str:
    """Encode the file as a data: URL the UI can render without a round trip."""
    encoded = base64.b64encode(file.content).decode("ascii")
    return f"data:{file.content_type};base64,{encoded}"


class MediaPipeline:
    """
    Holds the media a user attaches to a report until it is submitted.

    Files are validated before any preview work is done. Previews are
    derived in a worker thread; an asset is listed once its preview is ready,
    in the order it was accepted.
    """

    def __init__(
        self,
        max_file_size: Optional[int] = None,
        max_files: Optional[int] = None,
        field_name: str = MEDIA_FIELD_NAME
    ):
        """
        Initialize the pipeline.

        Args:
            max_file_size: Maximum accepted size in bytes
            max_files: Maximum number of assets per submission
            field_name: Multipart field name expected by the backend
        """
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size_bytes
        self.max_files = max_files if max_files is not None else settings.max_media_files
        self.field_name = field_name

        self._pending: List[PendingAsset] = []
        self._sequence = itertools.count()

    @property
    def pending(self) -> List[PendingAsset]:
        """Snapshot of accepted assets in acceptance order."""
        return list(self._pending)

    @property
    def previews(self) -> List[str]:
        return [asset.preview for asset in self._pending]

    def __len__(self) -> int:
        return len(self._pending)

    def validate(self, file: MediaFile) -> MediaKind:
        """
        Check a file against size and type rules.

        Raises:
            FileTooLarge: File exceeds max_file_size
            UnsupportedType: File is not image, video or audio
        """
        if file.size > self.max_file_size:
            raise FileTooLarge(file.filename, file.size, self.max_file_size)

        kind = classify(file.content_type)
        if kind == MediaKind.UNKNOWN:
            raise UnsupportedType(file.filename, file.content_type)

        return kind

    async def ingest(self, file: MediaFile) -> PendingAsset:
        """
        Validate a file, derive its preview and add it to the pending list.

        Args:
            file: The user-selected file

        Returns:
            The accepted PendingAsset

        Raises:
            MediaValidationError: The file was rejected
        """
        kind = self.validate(file)
        sequence = next(self._sequence)

        preview = await asyncio.to_thread(build_preview, file)

        asset = PendingAsset(
            file=file,
            preview=preview,
            kind=kind,
            size=file.size,
            sequence=sequence,
        )
        position = bisect.bisect([a.sequence for a in self._pending], sequence)
        self._pending.insert(position, asset)

        logger.debug(f"Accepted {kind.value} {file.filename} ({file.size} bytes)")
        return asset

    def remove(self, index: int) -> Optional[PendingAsset]:
        """Remove the asset at index; out-of-range indexes are ignored."""
        if 0 <= index < len(self._pending):
            return self._pending.pop(index)
        return None

    def discard(self, asset: PendingAsset) -> bool:
        """Remove a specific asset. Returns False if it was already gone."""
        for i, pending in enumerate(self._pending):
            if pending is asset:
                del self._pending[i]
                return True
        return False

    def clear(self) -> None:
        self._pending.clear()

    def ensure_submittable(self, pending: Optional[Sequence[PendingAsset]] = None) -> None:
        """
        Raises:
            TooManyMediaFiles: More assets than a submission allows
        """
        assets = self._pending if pending is None else pending
        if len(assets) > self.max_files:
            raise TooManyMediaFiles(self.max_files)

    def to_payload_fragments(
        self,
        pending: Optional[Sequence[PendingAsset]] = None
    ) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        """
        Package assets as multipart file parts.

        Every asset goes under the same field name regardless of its kind.

        Raises:
            TooManyMediaFiles: More assets than a submission allows
        """
        assets = list(self._pending if pending is None else pending)
        self.ensure_submittable(assets)
        return [
            (self.field_name, (a.file.filename, a.file.content, a.file.content_type))
            for a in assets
        ]


def resolve_media_url(path: str, base_url: Optional[str] = None) -> str:
    """
    Turn a server media reference into an absolute URL.

    Absolute http(s) and data: references are returned unchanged.
    """
    if path.startswith(("http://", "https://", "data:")):
        return path

    base = base_url or settings.api_base_url
    # Uploads are served from the server root, not the /api prefix
    if base.rstrip("/").endswith("/api"):
        base = base.rstrip("/")[: -len("/api")]
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
