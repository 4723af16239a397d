"""
Tests for the two update collaborators.

SqlJobUpdater runs against the in-memory SQLite database from conftest.
HttpJobUpdater runs against httpx.MockTransport, so the request it builds
and its error mapping can be checked without a server.
"""

import json
import uuid
from datetime import datetime, timezone

import httpx
import pytest

from models.enums import JobStatus, NoticeLevel
from models.job import Job
from models.technician import Technician
from scheduler.base import AssignmentUpdate, ScheduledJob, Resource
from scheduler.controller import InteractionController
from scheduler.errors import JobNotFoundError, UpdateFailedError
from scheduler.notices import NoticeLog
from store.repository import load_jobs, load_resources
from store.updater import SqlJobUpdater, HttpJobUpdater

NINE = datetime(2026, 10, 21, 9, 0, tzinfo=timezone.utc)
TEN = datetime(2026, 10, 21, 10, 0, tzinfo=timezone.utc)


async def _seed(session):
    tech = Technician(full_name="Ana Ruiz", email="ana@example.com")
    job = Job(
        job_number="J-1", title="Leak", status=JobStatus.DRAFT.value,
        estimated_duration=45, customer_name="Maria Lopez",
    )
    session.add_all([tech, job])
    await session.commit()
    return tech, job


# ── SqlJobUpdater ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_sql_updater_assigns_job(session_factory, async_session):
    tech, job = await _seed(async_session)
    updater = SqlJobUpdater(session_factory)

    result = await updater.update_job_assignment(str(job.id), AssignmentUpdate(
        resource_id=str(tech.id),
        scheduled_start=NINE,
        scheduled_end=TEN,
        status=JobStatus.SCHEDULED,
    ))

    assert result.resource_id == str(tech.id)
    assert result.scheduled_start == NINE
    assert result.status == JobStatus.SCHEDULED

    async with session_factory() as fresh:
        (stored,) = await load_jobs(fresh)
    assert stored.resource_id == str(tech.id)
    assert stored.scheduled_end == TEN


@pytest.mark.asyncio
async def test_sql_updater_only_writes_set_fields(session_factory, async_session):
    tech, job = await _seed(async_session)
    updater = SqlJobUpdater(session_factory)
    await updater.update_job_assignment(str(job.id), AssignmentUpdate(
        resource_id=str(tech.id), scheduled_start=NINE, scheduled_end=TEN,
    ))

    result = await updater.update_job_assignment(
        str(job.id), AssignmentUpdate(scheduled_end=NINE.replace(hour=11), estimated_duration=120)
    )
    assert result.resource_id == str(tech.id)
    assert result.scheduled_start == NINE
    assert result.estimated_duration == 120
    assert result.customer_name == "Maria Lopez"


@pytest.mark.asyncio
async def test_sql_updater_unknown_job(session_factory):
    updater = SqlJobUpdater(session_factory)
    with pytest.raises(JobNotFoundError):
        await updater.update_job_assignment(str(uuid.uuid4()), AssignmentUpdate(scheduled_end=TEN))
    with pytest.raises(JobNotFoundError):
        await updater.update_job_assignment("not-a-uuid", AssignmentUpdate(scheduled_end=TEN))


@pytest.mark.asyncio
async def test_repository_converts_rows(async_session):
    tech, _ = await _seed(async_session)
    (resource,) = await load_resources(async_session)
    assert resource.id == str(tech.id)
    assert resource.title == "Ana Ruiz"

    (job,) = await load_jobs(async_session)
    assert job.resource_id is None
    assert job.status == JobStatus.DRAFT
    assert job.estimated_duration == 45


# ── HttpJobUpdater ──────────────────────────────────────────────

def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://store")


@pytest.mark.asyncio
async def test_http_updater_sends_only_set_fields():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "id": "abc",
            "job_number": "J-1",
            "title": "Leak",
            "assigned_to": None,
            "scheduled_start": "2026-10-21T09:00:00+00:00",
            "scheduled_end": "2026-10-21T10:45:00+00:00",
            "estimated_duration": 105,
            "status": "scheduled",
            "priority": "high",
        })

    updater = HttpJobUpdater(client=_mock_client(handler))
    result = await updater.update_job_assignment(
        "abc", AssignmentUpdate(scheduled_end=datetime(2026, 10, 21, 10, 45, tzinfo=timezone.utc))
    )
    await updater.aclose()

    assert seen["method"] == "PATCH"
    assert seen["path"] == "/jobs/abc/assignment"
    assert list(seen["body"]) == ["scheduled_end"]
    assert result.scheduled_end == datetime(2026, 10, 21, 10, 45, tzinfo=timezone.utc)
    assert result.status == JobStatus.SCHEDULED


@pytest.mark.asyncio
async def test_http_updater_maps_404():
    updater = HttpJobUpdater(client=_mock_client(lambda request: httpx.Response(404)))
    with pytest.raises(JobNotFoundError):
        await updater.update_job_assignment("abc", AssignmentUpdate(scheduled_end=TEN))


@pytest.mark.asyncio
async def test_http_updater_maps_server_errors():
    updater = HttpJobUpdater(client=_mock_client(lambda request: httpx.Response(500)))
    with pytest.raises(UpdateFailedError):
        await updater.update_job_assignment("abc", AssignmentUpdate(scheduled_end=TEN))


@pytest.mark.asyncio
async def test_http_updater_maps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    updater = HttpJobUpdater(client=_mock_client(handler))
    with pytest.raises(UpdateFailedError):
        await updater.update_job_assignment("abc", AssignmentUpdate(scheduled_end=TEN))


@pytest.mark.asyncio
async def test_http_updater_accepts_bare_acknowledgement():
    for reply in (httpx.Response(204), httpx.Response(200, content=b""), httpx.Response(200, json={"ok": True})):
        updater = HttpJobUpdater(client=_mock_client(lambda request, reply=reply: reply))
        assert await updater.update_job_assignment("abc", AssignmentUpdate(scheduled_end=TEN)) is None
        await updater.aclose()


@pytest.mark.asyncio
async def test_resize_acknowledged_with_204_reports_success():
    job = ScheduledJob(
        id="abc", job_number="J-1", resource_id="tech-1",
        scheduled_start=TEN, scheduled_end=TEN.replace(hour=11), status=JobStatus.SCHEDULED,
    )
    notices = NoticeLog()
    updater = HttpJobUpdater(client=_mock_client(lambda request: httpx.Response(204)))
    controller = InteractionController(
        jobs_provider=lambda: [job],
        updater=updater,
        notifier=notices,
        resources_provider=lambda: [Resource("tech-1", "Ana Ruiz")],
    )

    controller.start_resize(job, 0.0)
    await controller.release(50.0).wait()
    await updater.aclose()

    assert notices.last.level == NoticeLevel.SUCCESS
    assert notices.last.message == "Duration updated to 2h"
