from __future__ import annotations

import asyncio
from typing import Any, Optional

import requests
from pydantic import ValidationError as ModelValidationError

from translator_client.core.config import Settings
from translator_client.core.errors import FetchError, IntentError
from translator_client.core.logging import configure_logging
from translator_client.models.common import Job, UploadIntent
from translator_client.services.token_provider import TokenProvider

logger = configure_logging()


class JobAPIClient:
    """غلاف لواجهة المهام الخلفية: طلب رابط الرفع، قائمة المهام، وتفاصيل مهمة واحدة.

    يُجلب رمز جديد من مزود الهوية قبل كل طلب، ولا يحتفظ العميل بأي نسخة محلية من النتائج.
    """

    def __init__(
        self,
        settings: Settings,
        token_provider: TokenProvider,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = settings.api_base
        self.timeout = settings.request_timeout_seconds
        self.token_provider = token_provider
        self.http = http or requests.Session()

    # ------------------------------------------------------------------
    async def request_upload_intent(
        self,
        filename: str,
        target_language: str,
        source_language: str = "auto",
    ) -> UploadIntent:
        payload = {
            "filename": filename,
            "targetLanguage": target_language,
            "sourceLanguage": source_language,
        }
        try:
            response = await self._send("POST", "/upload", json=payload)
        except requests.RequestException as exc:
            logger.warning("فشل طلب رابط الرفع للملف %s: %s", filename, exc)
            raise IntentError() from exc

        if not response.ok:
            reason = _error_reason(response)
            logger.warning("رفض الخادم طلب الرفع (%s): %s", response.status_code, reason)
            raise IntentError(reason, status_code=response.status_code)

        try:
            intent = UploadIntent.model_validate(response.json())
        except (ValueError, ModelValidationError) as exc:
            raise IntentError("استجابة غير صالحة من الخادم لطلب الرفع.") from exc
        logger.info("تم إنشاء المهمة %s للملف %s.", intent.job_id, filename)
        return intent

    async def list_jobs(self) -> list[Job]:
        data = await self._fetch("/jobs", "تعذر جلب قائمة المهام.")
        if not isinstance(data, dict):
            raise FetchError("استجابة غير صالحة لقائمة المهام.")
        items = data.get("jobs")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise FetchError("استجابة غير صالحة لقائمة المهام.")
        try:
            return [Job.model_validate(item) for item in items]
        except ModelValidationError as exc:
            raise FetchError("استجابة غير صالحة لقائمة المهام.") from exc

    async def get_job(self, job_id: str) -> Job:
        data = await self._fetch(f"/jobs/{job_id}", "تعذر جلب رابط التنزيل.")
        try:
            return Job.model_validate(data)
        except ModelValidationError as exc:
            raise FetchError(f"استجابة غير صالحة للمهمة {job_id}.") from exc

    # ------------------------------------------------------------------
    async def _fetch(self, path: str, failure_message: str) -> Any:
        try:
            response = await self._send("GET", path)
        except requests.RequestException as exc:
            raise FetchError(failure_message) from exc
        if not response.ok:
            raise FetchError(failure_message, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(failure_message) from exc

    async def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        token = await self.token_provider.acquire()
        headers = {"Authorization": f"Bearer {token}"}
        return await asyncio.to_thread(
            self.http.request,
            method,
            f"{self.base_url}{path}",
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )


def _error_reason(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None
