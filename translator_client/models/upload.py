from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class UploadState(str, Enum):
    idle = "IDLE"
    selected = "SELECTED"
    uploading = "UPLOADING"
    succeeded = "SUCCEEDED"
    failed = "FAILED"


class UploadPhase(str, Enum):
    selected = "SELECTED"
    requesting_intent = "REQUESTING_INTENT"
    transferring = "TRANSFERRING"
    done = "DONE"
    errored = "ERRORED"


@dataclass(frozen=True)
class SelectedFile:
    """ملف اختاره المستخدم: الاسم والحجم ونوع المحتوى المُعلن، مع مصدر البايتات."""

    name: str
    size_bytes: int
    content_type: str = "application/octet-stream"
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: Path | str) -> "SelectedFile":
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        size_bytes = path.stat().st_size if path.exists() else 0
        return cls(
            name=path.name,
            size_bytes=size_bytes,
            content_type=mime_type or "application/octet-stream",
            path=path,
        )

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: Optional[str] = None) -> "SelectedFile":
        mime_type = content_type or mimetypes.guess_type(name)[0]
        return cls(
            name=name,
            size_bytes=len(data),
            content_type=mime_type or "application/octet-stream",
            data=data,
        )

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower().lstrip(".")

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise FileNotFoundError(f"لا يوجد مصدر بيانات للملف {self.name}.")
        return self.path.read_bytes()


@dataclass
class PendingUpload:
    file: SelectedFile
    target_language: str
    phase: UploadPhase = UploadPhase.selected
    job_id: Optional[str] = None
