from __future__ import annotations

import asyncio
from typing import Callable, Optional

from translator_client.core.config import Settings
from translator_client.core.errors import TransferError, TranslatorError, ValidationError
from translator_client.core.logging import configure_logging
from translator_client.models.common import UploadIntent
from translator_client.models.languages import is_supported
from translator_client.models.upload import PendingUpload, SelectedFile, UploadPhase, UploadState
from translator_client.services.job_api import JobAPIClient
from translator_client.storage.blob import BlobUploader
from translator_client.storage.registry import JobRegistry
from translator_client.utils.file_utils import PDF_CONTENT_TYPE, validate_document

logger = configure_logging()


class UploadOrchestrator:
    """إدارة إرسال ملف واحد للترجمة على مرحلتين: طلب رابط الرفع ثم رفع البايتات مباشرة.

    الحالات: IDLE → SELECTED → UPLOADING → SUCCEEDED / FAILED. لا يُسمح إلا بإرسال
    واحد في الوقت نفسه، ولا توجد أي إعادة محاولة تلقائية.
    """

    def __init__(
        self,
        settings: Settings,
        api: JobAPIClient,
        uploader: BlobUploader,
        registry: JobRegistry,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.api = api
        self.uploader = uploader
        self.registry = registry
        self.source_language = settings.source_language
        self.on_change = on_change

        if not is_supported(settings.default_target_language):
            raise ValueError(f"لغة افتراضية غير مدعومة: {settings.default_target_language}")
        self.target_language = settings.default_target_language

        self.state = UploadState.idle
        self.pending: Optional[PendingUpload] = None
        self.error: Optional[str] = None
        self.success: Optional[str] = None
        self.last_error: Optional[TranslatorError] = None

    @property
    def uploading(self) -> bool:
        return self.state is UploadState.uploading

    @property
    def selected_file(self) -> Optional[SelectedFile]:
        return self.pending.file if self.pending else None

    # ------------------------------------------------------------------
    def set_target_language(self, code: str) -> None:
        if not is_supported(code):
            raise ValidationError(f"اللغة غير مدعومة: {code}")
        self.target_language = code
        if self.pending and not self.uploading:
            self.pending.target_language = code
        self._notify()

    def select(self, file: SelectedFile) -> None:
        if self.uploading:
            raise ValidationError("جاري رفع ملف آخر، يرجى الانتظار.")

        self.error = None
        self.success = None
        try:
            validate_document(file)
        except ValidationError as exc:
            self._reject(exc)
            # الملف الصالح المختار سابقًا لا يُفقد بسبب اختيار غير صالح.
            self.state = UploadState.selected if self.pending else UploadState.idle
            self._notify()
            raise

        self.pending = PendingUpload(file=file, target_language=self.target_language)
        self.last_error = None
        self.state = UploadState.selected
        logger.info("تم اختيار الملف %s (%s بايت).", file.name, file.size_bytes)
        self._notify()

    async def submit(self) -> Optional[str]:
        """تنفيذ الإرسال. يعيد معرف المهمة عند النجاح، و None عند الفشل (مع تسجيل الخطأ)."""
        if self.uploading:
            raise ValidationError("يوجد رفع قيد التنفيذ بالفعل.")
        if self.pending is None:
            exc = ValidationError("يرجى اختيار ملف أولًا.")
            self._reject(exc)
            self._notify()
            raise exc

        pending = self.pending
        self.state = UploadState.uploading
        self.error = None
        self.success = None
        self.last_error = None
        self._notify()

        try:
            # البايتات تُقرأ قبل طلب الرابط حتى لا تُنشأ مهمة على الخادم لملف تعذرت قراءته.
            data = await self._read(pending)
            intent = await self._request_intent(pending)
            await self._transfer(pending, intent, data)
        except TranslatorError as exc:
            pending.phase = UploadPhase.errored
            self._fail(exc)
            return None
        except BaseException:
            # إلغاء خارجي (مثل إغلاق الجلسة) لا يترك الحالة عالقة في UPLOADING.
            pending.phase = UploadPhase.errored
            self.state = UploadState.failed
            self._notify()
            raise

        pending.phase = UploadPhase.done
        pending.job_id = intent.job_id
        self._succeed(intent.job_id)
        return intent.job_id

    # ------------------------------------------------------------------
    async def _request_intent(self, pending: PendingUpload) -> UploadIntent:
        pending.phase = UploadPhase.requesting_intent
        self._notify()
        return await self.api.request_upload_intent(
            pending.file.name,
            pending.target_language,
            source_language=self.source_language,
        )

    async def _read(self, pending: PendingUpload) -> bytes:
        try:
            return await asyncio.to_thread(pending.file.read_bytes)
        except OSError as exc:
            raise TransferError(f"تعذر قراءة الملف {pending.file.name}.") from exc

    async def _transfer(self, pending: PendingUpload, intent: UploadIntent, data: bytes) -> None:
        pending.phase = UploadPhase.transferring
        self._notify()
        await self.uploader.put(intent.upload_url, data, content_type=PDF_CONTENT_TYPE)

    def _succeed(self, job_id: str) -> None:
        self.state = UploadState.succeeded
        self.pending = None
        self.success = f"تم رفع الملف بنجاح! معرف المهمة: {job_id}. ستبدأ الترجمة قريبًا."
        logger.info("اكتمل رفع المهمة %s.", job_id)
        self.registry.schedule_refresh()
        self._notify()

    def _fail(self, exc: TranslatorError) -> None:
        self.state = UploadState.failed
        self.last_error = exc
        self.error = exc.message
        logger.warning("فشل الإرسال [%s]: %s", exc.kind, exc.message)
        self._notify()

    def _reject(self, exc: ValidationError) -> None:
        self.last_error = exc
        self.error = exc.message
        logger.info("رفض الطلب: %s", exc.message)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
