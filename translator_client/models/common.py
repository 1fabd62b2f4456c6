from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    pending = "PENDING"
    processing = "PROCESSING"
    completed = "COMPLETED"
    failed = "FAILED"


class Job(BaseModel):
    """مهمة ترجمة كما يعيدها الخادم. الحالة تُحفظ كنص خام لقبول أي حالة مستقبلية."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    job_id: str = Field(..., alias="jobId")
    filename: str = ""
    target_language: str = Field("", alias="targetLanguage")
    status: str = JobStatus.pending.value
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")

    @property
    def is_completed(self) -> bool:
        return self.status == JobStatus.completed.value


class UploadIntent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    upload_url: str = Field(..., alias="uploadUrl", min_length=1)
    job_id: str = Field(..., alias="jobId", min_length=1)
