from __future__ import annotations

from typing import Callable, Optional

import requests

from translator_client.core.config import Settings
from translator_client.core.errors import TranslatorError
from translator_client.core.logging import configure_logging
from translator_client.services.job_api import JobAPIClient
from translator_client.services.token_provider import CognitoTokenProvider, TokenProvider
from translator_client.services.upload_orchestrator import UploadOrchestrator
from translator_client.storage.blob import BlobUploader
from translator_client.storage.registry import JobRegistry, Navigator

logger = configure_logging()


class TranslatorSession:
    """سياق جلسة مستخدم مسجّل: يربط المكونات ويملك دورة حياة الاستطلاع الدوري."""

    def __init__(
        self,
        settings: Settings,
        token_provider: Optional[TokenProvider] = None,
        http: Optional[requests.Session] = None,
        navigate: Optional[Navigator] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.settings = settings
        self._owns_http = http is None
        self.http = http or requests.Session()
        self.token_provider = token_provider or CognitoTokenProvider(settings)
        self.api = JobAPIClient(settings, self.token_provider, http=self.http)
        self.registry = JobRegistry(settings, self.api, navigate=navigate, on_change=on_change)
        self.uploads = UploadOrchestrator(
            settings,
            self.api,
            BlobUploader(settings, http=self.http),
            self.registry,
            on_change=on_change,
        )
        self.error: Optional[str] = None

    @property
    def login_id(self) -> str:
        return getattr(self.token_provider, "login_id", None) or "User"

    async def __aenter__(self) -> "TranslatorSession":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    async def open(self) -> None:
        await self.registry.start()

    async def close(self) -> None:
        await self.registry.close()
        if self._owns_http:
            self.http.close()
            self._owns_http = False

    async def sign_out(self) -> None:
        await self.close()
        sign_out = getattr(self.token_provider, "sign_out", None)
        if sign_out is not None:
            sign_out()

    async def download(self, job_id: str) -> Optional[str]:
        """تنزيل نتيجة مهمة؛ أي فشل يظهر كرسالة خطأ للمستخدم بدل أن يُتجاهل."""
        self.error = None
        try:
            return await self.registry.download(job_id)
        except TranslatorError as exc:
            logger.warning("فشل تنزيل المهمة %s: %s", job_id, exc.message)
            self.error = exc.message
            return None
