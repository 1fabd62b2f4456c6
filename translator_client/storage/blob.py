import asyncio
from typing import Optional

import requests

from translator_client.core.config import Settings
from translator_client.core.errors import TransferError
from translator_client.core.logging import configure_logging
from translator_client.utils.file_utils import PDF_CONTENT_TYPE

logger = configure_logging()


class BlobUploader:
    """رفع البايتات مباشرة إلى التخزين عبر رابط موقّع مؤقت."""

    def __init__(self, settings: Settings, http: Optional[requests.Session] = None) -> None:
        self.timeout = settings.request_timeout_seconds
        self.http = http or requests.Session()

    async def put(self, upload_url: str, data: bytes, content_type: str = PDF_CONTENT_TYPE) -> None:
        logger.info("رفع %s بايت إلى التخزين.", len(data))
        try:
            response = await asyncio.to_thread(
                self.http.put,
                upload_url,
                data=data,
                headers={"Content-Type": content_type},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("فشل الاتصال بالتخزين: %s", exc)
            raise TransferError() from exc

        if not 200 <= response.status_code < 300:
            logger.warning("رفض التخزين الملف المرفوع (%s).", response.status_code)
            raise TransferError(status_code=response.status_code)
