from .common import Job, JobStatus, UploadIntent
from .languages import LANGUAGES, Language, is_supported, language_name
from .upload import PendingUpload, SelectedFile, UploadPhase, UploadState

__all__ = [
    "Job",
    "JobStatus",
    "LANGUAGES",
    "Language",
    "PendingUpload",
    "SelectedFile",
    "UploadIntent",
    "UploadPhase",
    "UploadState",
    "is_supported",
    "language_name",
]
