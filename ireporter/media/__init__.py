"""
iReporter - Media Module
Validation, preview and packaging of report attachments.
"""

from ireporter.media.pipeline import (
    MediaPipeline,
    MediaFile,
    MediaKind,
    PendingAsset,
    classify,
    resolve_media_url,
)

__all__ = [
    "MediaPipeline",
    "MediaFile",
    "MediaKind",
    "PendingAsset",
    "classify",
    "resolve_media_url",
]
