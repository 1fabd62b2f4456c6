from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_response
from translator_client.core.errors import AuthError, DownloadUnavailableError, FetchError
from translator_client.models.common import Job
from translator_client.services.job_api import JobAPIClient
from translator_client.services.token_provider import StaticTokenProvider
from translator_client.storage.registry import BadgeClass, JobRegistry, badge_class


def _job(job_id: str, status: str = "PENDING", **extra) -> Job:
    return Job(jobId=job_id, filename=f"{job_id}.pdf", targetLanguage="fr", status=status, **extra)


@pytest.fixture
def api() -> AsyncMock:
    api = AsyncMock()
    api.list_jobs.return_value = []
    return api


@pytest.fixture
def navigate() -> MagicMock:
    return MagicMock(return_value=None)


@pytest.fixture
def registry(settings, api, navigate) -> JobRegistry:
    return JobRegistry(settings, api, navigate=navigate)


# ------------------------------------------------------------------ badges
@pytest.mark.parametrize(
    "status, expected",
    [
        ("PENDING", BadgeClass.pending),
        ("PROCESSING", BadgeClass.processing),
        ("COMPLETED", BadgeClass.success),
        ("FAILED", BadgeClass.error),
        ("UNKNOWN", BadgeClass.pending),
        ("completed", BadgeClass.pending),
        ("Failed", BadgeClass.pending),
        ("", BadgeClass.pending),
        (None, BadgeClass.pending),
    ],
)
def test_badge_class_is_total(status, expected):
    assert badge_class(status) is expected


# ----------------------------------------------------------------- refresh
@pytest.mark.asyncio
async def test_refresh_replaces_collection_in_backend_order(registry, api):
    api.list_jobs.return_value = [_job("J1"), _job("J2")]
    await registry.refresh()

    api.list_jobs.return_value = [_job("J3", "PROCESSING"), _job("J1", "COMPLETED")]
    assert await registry.refresh() is True

    assert [job.job_id for job in registry.jobs] == ["J3", "J1"]
    assert registry.get("J2") is None
    assert registry.get("J1").status == "COMPLETED"


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [FetchError(status_code=500), AuthError()])
async def test_failed_refresh_keeps_previous_collection(registry, api, error):
    api.list_jobs.return_value = [_job("J1"), _job("J2", "FAILED")]
    await registry.refresh()
    before = registry.jobs

    api.list_jobs.side_effect = error
    assert await registry.refresh() is False

    assert registry.jobs == before


@pytest.mark.asyncio
async def test_malformed_listing_keeps_previous_collection(settings, http):
    api = JobAPIClient(settings, StaticTokenProvider("tok"), http=http)
    registry = JobRegistry(settings, api)
    http.request.return_value = make_response(200, {"jobs": [{"jobId": "J1", "status": "PENDING"}]})
    await registry.refresh()

    http.request.return_value = make_response(200, {"jobs": 5})
    assert await registry.refresh() is False

    assert [job.job_id for job in registry.jobs] == ["J1"]


@pytest.mark.asyncio
async def test_polling_survives_unexpected_error(registry, api):
    api.list_jobs.side_effect = [[], RuntimeError("boom"), [_job("J1")], [_job("J1")], [_job("J1")], [_job("J1")]]
    await registry.start()

    for _ in range(200):
        if registry.jobs:
            break
        await asyncio.sleep(0.005)

    assert registry.polling
    assert [job.job_id for job in registry.jobs] == ["J1"]
    await registry.close()


@pytest.mark.asyncio
async def test_refresh_notifies_listener(settings, api):
    on_change = MagicMock()
    registry = JobRegistry(settings, api, on_change=on_change)

    await registry.refresh()

    on_change.assert_called_once_with()


# ----------------------------------------------------------------- polling
@pytest.mark.asyncio
async def test_start_refreshes_immediately_then_polls(registry, api):
    await registry.start()
    assert api.list_jobs.await_count == 1
    assert registry.polling

    await asyncio.sleep(0.05)
    assert api.list_jobs.await_count >= 3

    await registry.close()


@pytest.mark.asyncio
async def test_start_twice_keeps_single_timer(registry):
    await registry.start()
    task = registry._poll_task

    await registry.start()

    assert registry._poll_task is task
    await registry.close()


@pytest.mark.asyncio
async def test_close_stops_polling_and_is_idempotent(registry, api):
    await registry.start()
    poll_task = registry._poll_task

    await registry.close()
    await registry.close()

    assert poll_task.cancelled()
    assert not registry.polling
    calls = api.list_jobs.await_count
    await asyncio.sleep(0.05)
    assert api.list_jobs.await_count == calls


@pytest.mark.asyncio
async def test_no_refresh_after_close(registry, api):
    await registry.close()

    assert registry.schedule_refresh() is None
    assert await registry.refresh() is False
    api.list_jobs.assert_not_awaited()
    with pytest.raises(RuntimeError):
        await registry.start()


@pytest.mark.asyncio
async def test_result_arriving_after_close_is_discarded(registry, api):
    gate = asyncio.Event()

    async def _slow_list():
        await gate.wait()
        return [_job("LATE")]

    api.list_jobs.side_effect = _slow_list
    pending = asyncio.create_task(registry.refresh())
    await asyncio.sleep(0)

    registry._closed = True
    gate.set()

    assert await pending is False
    assert registry.jobs == ()


# ---------------------------------------------------------- one-shot refresh
@pytest.mark.asyncio
async def test_scheduled_refresh_runs_after_delay(registry, api):
    api.list_jobs.return_value = [_job("J1")]

    task = registry.schedule_refresh(delay=0.01)
    assert api.list_jobs.await_count == 0
    await task

    assert [job.job_id for job in registry.jobs] == ["J1"]


@pytest.mark.asyncio
async def test_new_schedule_supersedes_pending_one(registry, api):
    first = registry.schedule_refresh(delay=10)
    second = registry.schedule_refresh(delay=0.01)

    await second
    await asyncio.sleep(0)

    assert first.cancelled()
    assert api.list_jobs.await_count == 1


@pytest.mark.asyncio
async def test_close_cancels_scheduled_refresh(registry, api):
    task = registry.schedule_refresh(delay=10)

    await registry.close()

    assert task.cancelled()
    api.list_jobs.assert_not_awaited()


# ---------------------------------------------------------------- download
@pytest.mark.asyncio
async def test_download_uses_fresh_job_link(registry, api, navigate):
    api.list_jobs.return_value = [_job("J1", "COMPLETED", downloadUrl=None)]
    await registry.refresh()
    api.get_job.return_value = _job("J1", "COMPLETED", downloadUrl="https://blob/y")

    url = await registry.download("J1")

    assert url == "https://blob/y"
    api.get_job.assert_awaited_once_with("J1")
    navigate.assert_called_once_with("https://blob/y")


@pytest.mark.asyncio
async def test_download_never_serves_listed_link(registry, api, navigate):
    api.list_jobs.return_value = [_job("J1", "COMPLETED", downloadUrl="https://blob/stale")]
    await registry.refresh()
    api.get_job.return_value = _job("J1", "COMPLETED", downloadUrl="https://blob/fresh")

    await registry.download("J1")

    navigate.assert_called_once_with("https://blob/fresh")


@pytest.mark.asyncio
async def test_download_without_link_is_unavailable(registry, api, navigate):
    api.get_job.return_value = _job("J1", "COMPLETED", downloadUrl=None)

    with pytest.raises(DownloadUnavailableError):
        await registry.download("J1")
    navigate.assert_not_called()


@pytest.mark.asyncio
async def test_download_awaits_async_navigator(settings, api):
    navigate = AsyncMock()
    registry = JobRegistry(settings, api, navigate=navigate)
    api.get_job.return_value = _job("J1", "COMPLETED", downloadUrl="https://blob/y")

    await registry.download("J1")

    navigate.assert_awaited_once_with("https://blob/y")


@pytest.mark.asyncio
async def test_cards_describe_jobs_for_display(registry, api):
    api.list_jobs.return_value = [
        _job("J1", "COMPLETED", createdAt="2024-05-01T10:00:00Z"),
        Job(jobId="J2", filename="x.pdf", targetLanguage="qq", status="MYSTERY"),
    ]
    await registry.refresh()

    first, second = registry.cards()

    assert first["language"] == "French"
    assert first["badge"] == "success"
    assert first["downloadable"] is True
    assert first["created_at"].startswith("2024-05-01") or first["created_at"].startswith("2024-04-30")
    assert second["language"] == "qq"
    assert second["badge"] == "pending"
    assert second["downloadable"] is False
    assert second["created_at"] == ""
