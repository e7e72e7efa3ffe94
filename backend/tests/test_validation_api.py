from types import SimpleNamespace

import httpx
import pytest

from driver_onboarding.api.deps import get_db, get_session_factory, get_settings
from driver_onboarding.core.config import Settings
from driver_onboarding.core.constants import ValidationStatus
from driver_onboarding.main import app

pytestmark = pytest.mark.anyio


def make_client(session_factory, app_settings: Settings) -> httpx.AsyncClient:
    async def _get_db():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: app_settings
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


async def test_health(session_factory):
    async with make_client(session_factory, Settings()) as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_manual_run_without_credential_is_skipped(session_factory, add_driver, load_driver):
    driver_id = await add_driver()

    async with make_client(session_factory, Settings(OPENAI_API_KEY="")) as client:
        response = await client.post("/api/v1/validation/run")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Validation job triggered successfully"
    assert body["summary"]["status"] == "DISABLED"
    assert body["summary"]["trigger"] == "manual"
    assert (await load_driver(driver_id)).validation_status == ValidationStatus.PENDING


async def test_manual_run_with_nothing_pending(session_factory):
    async with make_client(session_factory, Settings(OPENAI_API_KEY="sk-test")) as client:
        response = await client.post("/api/v1/validation/run")

    assert response.status_code == 200
    assert response.json()["summary"]["status"] == "NO_WORK"


async def test_manual_run_surfaces_selection_failure(empty_session_factory):
    async with make_client(empty_session_factory, Settings(OPENAI_API_KEY="sk-test")) as client:
        response = await client.post("/api/v1/validation/run")

    assert response.status_code == 500
    assert "Could not select pending drivers" in response.json()["detail"]


async def test_reset_driver(session_factory, add_driver, load_driver):
    driver_id = await add_driver(status=ValidationStatus.FAILED.value)

    async with make_client(session_factory, Settings()) as client:
        response = await client.post(f"/api/v1/validation/drivers/{driver_id}/reset")

    assert response.status_code == 200
    assert response.json() == {"id": driver_id, "validation_status": "pending"}
    assert (await load_driver(driver_id)).validation_status == ValidationStatus.PENDING


async def test_reset_unknown_driver(session_factory):
    async with make_client(session_factory, Settings()) as client:
        response = await client.post("/api/v1/validation/drivers/424242/reset")

    assert response.status_code == 404


async def test_enqueue_queues_a_manual_pass(session_factory, monkeypatch):
    from driver_onboarding.tasks import validation_tasks

    queued = []

    def fake_delay(**kwargs):
        queued.append(kwargs)
        return SimpleNamespace(id="celery-task-42")

    monkeypatch.setattr(validation_tasks, "run_validation_pass", SimpleNamespace(delay=fake_delay))

    async with make_client(session_factory, Settings()) as client:
        response = await client.post("/api/v1/validation/enqueue")

    assert response.status_code == 200
    assert response.json() == {"message": "Validation pass queued", "celery_task_id": "celery-task-42"}
    assert queued == [{"trigger": "manual"}]
