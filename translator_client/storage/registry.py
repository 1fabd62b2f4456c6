from __future__ import annotations

import asyncio
import inspect
import webbrowser
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from translator_client.core.config import Settings
from translator_client.core.errors import AuthError, DownloadUnavailableError, FetchError
from translator_client.core.logging import configure_logging
from translator_client.models.common import Job, JobStatus
from translator_client.models.languages import language_name
from translator_client.services.job_api import JobAPIClient

logger = configure_logging()

Navigator = Callable[[str], Union[Awaitable[None], None]]


class BadgeClass(str, Enum):
    success = "success"
    processing = "processing"
    error = "error"
    pending = "pending"


_BADGES = {
    JobStatus.completed.value: BadgeClass.success,
    JobStatus.processing.value: BadgeClass.processing,
    JobStatus.failed.value: BadgeClass.error,
}


def badge_class(status: Optional[str]) -> BadgeClass:
    """تصنيف الشارة لحالة المهمة؛ أي حالة غير معروفة تُعرض كـ pending."""
    return _BADGES.get(status or "", BadgeClass.pending)


async def open_in_browser(url: str) -> None:
    await asyncio.to_thread(webbrowser.open_new_tab, url)


class JobRegistry:
    """النسخة المحلية من مهام المستخدم، تُستبدل بالكامل عند كل تحديث من الخادم.

    يملك السجل مهمتين: استطلاع دوري كل ``poll_interval_seconds``، وتحديث لمرة واحدة
    يُجدول بعد نجاح الرفع. كلاهما يُلغى مرة واحدة فقط عند ``close``.
    """

    def __init__(
        self,
        settings: Settings,
        api: JobAPIClient,
        navigate: Optional[Navigator] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.api = api
        self.poll_interval = settings.poll_interval_seconds
        self.refresh_delay = settings.refresh_delay_seconds
        self.navigate = navigate or open_in_browser
        self.on_change = on_change

        self._jobs: tuple[Job, ...] = ()
        self._poll_task: Optional[asyncio.Task] = None
        self._scheduled: Optional[asyncio.Task] = None
        self._refreshes: set[asyncio.Task] = set()
        self._closed = False

    @property
    def jobs(self) -> tuple[Job, ...]:
        return self._jobs

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, job_id: str) -> Optional[Job]:
        for job in self._jobs:
            if job.job_id == job_id:
                return job
        return None

    # ------------------------------------------------------------------
    async def refresh(self) -> bool:
        """جلب القائمة واستبدال المجموعة المحلية كاملة. عند الفشل تبقى القائمة السابقة."""
        if self._closed:
            return False
        try:
            jobs = await self.api.list_jobs()
        except (FetchError, AuthError) as exc:
            logger.warning("فشل تحديث قائمة المهام، الإبقاء على القائمة السابقة: %s", exc)
            return False

        if self._closed:
            logger.debug("تجاهل نتيجة تحديث وصلت بعد إغلاق الجلسة.")
            return False

        self._jobs = tuple(jobs)
        logger.debug("تم تحديث قائمة المهام (%s مهمة).", len(self._jobs))
        self._notify()
        return True

    async def start(self) -> None:
        """تحديث أولي ثم بدء الاستطلاع الدوري. لا يُنشأ مؤقت ثانٍ إن كان الأول يعمل."""
        if self._closed:
            raise RuntimeError("لا يمكن تشغيل سجل مهام مغلق.")
        if self.polling:
            return
        await self.refresh()
        if self._closed or self.polling:
            return
        self._poll_task = asyncio.create_task(self._poll_loop(), name="job-registry-poll")
        logger.info("بدء استطلاع المهام كل %s ثانية.", self.poll_interval)

    def schedule_refresh(self, delay: Optional[float] = None) -> Optional[asyncio.Task]:
        """جدولة تحديث لمرة واحدة بعد مهلة قصيرة، يحل محل أي تحديث مجدول لم يبدأ بعد."""
        if self._closed:
            return None
        if self._scheduled is not None and not self._scheduled.done():
            self._scheduled.cancel()

        delay = self.refresh_delay if delay is None else delay
        task = asyncio.create_task(self._delayed_refresh(delay), name="job-registry-refresh")
        self._scheduled = task
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)
        return task

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        tasks = [task for task in (self._poll_task, *self._refreshes) if task is not None and not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        self._poll_task = None
        self._scheduled = None
        logger.info("تم إيقاف استطلاع المهام.")

    # ------------------------------------------------------------------
    async def download(self, job_id: str) -> str:
        """جلب المهمة من جديد وتسليم رابط التنزيل؛ لا يُستخدم أي رابط محفوظ من القائمة."""
        job = await self.api.get_job(job_id)
        if not job.download_url:
            raise DownloadUnavailableError()

        logger.info("فتح رابط التنزيل للمهمة %s.", job_id)
        result = self.navigate(job.download_url)
        if inspect.isawaitable(result):
            await result
        return job.download_url

    def cards(self) -> list[dict]:
        cards: list[dict] = []
        for job in self._jobs:
            cards.append(
                {
                    "job_id": job.job_id,
                    "filename": job.filename,
                    "created_at": job.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S") if job.created_at else "",
                    "language": language_name(job.target_language),
                    "status": job.status,
                    "badge": badge_class(job.status).value,
                    "downloadable": job.is_completed,
                }
            )
        return cards

    # ------------------------------------------------------------------
    async def _poll_loop(self) -> None:
        while not self._closed:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.refresh()
            except Exception as exc:
                # دورة فاشلة واحدة لا تُنهي الاستطلاع؛ الدورة التالية تعيد المحاولة.
                logger.exception("خطأ غير متوقع أثناء استطلاع المهام: %s", exc)

    async def _delayed_refresh(self, delay: float) -> None:
        await asyncio.sleep(delay)
        # بعد انتهاء المهلة لم يعد التحديث قابلًا للاستبدال؛ يُسمح له بالاكتمال.
        if self._scheduled is asyncio.current_task():
            self._scheduled = None
        await self.refresh()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
