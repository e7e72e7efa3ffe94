from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from driver_onboarding.core.config import Settings
from driver_onboarding.core.constants import PassStatus, PassTrigger, ValidationStatus
from driver_onboarding.db.session import create_tables
from driver_onboarding.validation.oracle import DisabledOracleClient, OpenAIOracleClient
from driver_onboarding.validation.scheduler import (
    VALIDATION_TASK_NAME,
    build_batch_runner,
    build_beat_schedule,
    run_validation_pass,
)
from tests.fakes import ScriptedOracle

pytestmark = pytest.mark.anyio


def test_beat_schedule_runs_hourly_by_default():
    schedule = build_beat_schedule(Settings(VALIDATION_SCHEDULE_MINUTE="0"))

    entry = schedule["validate-pending-drivers"]
    assert entry["task"] == VALIDATION_TASK_NAME
    assert entry["schedule"].minute == {0}
    assert entry["kwargs"] == {"trigger": "scheduled"}


def test_runner_built_from_settings(tmp_path):
    runner = build_batch_runner(
        async_sessionmaker(),
        Settings(
            OPENAI_API_KEY="sk-test",
            UPLOADS_DIR=str(tmp_path),
            VALIDATION_RECENT_WINDOW_SECONDS=90,
            VALIDATION_MAX_CONCURRENCY=3,
        ),
    )

    assert isinstance(runner.oracle, OpenAIOracleClient)
    assert runner.recent_window == timedelta(seconds=90)
    assert runner.max_concurrency == 3
    assert runner.validator.fetcher.base_dir == Path(tmp_path)


def test_zero_concurrency_means_unbounded():
    runner = build_batch_runner(async_sessionmaker(), Settings(OPENAI_API_KEY="", VALIDATION_MAX_CONCURRENCY=0))

    assert isinstance(runner.oracle, DisabledOracleClient)
    assert runner.max_concurrency is None


async def test_pass_without_credential_is_disabled(session_factory, add_driver):
    await add_driver()

    summary = await run_validation_pass(
        session_factory,
        trigger=PassTrigger.MANUAL,
        source=Settings(OPENAI_API_KEY=""),
    )

    assert summary.status == PassStatus.DISABLED
    assert summary.selected == 0


async def test_cwd_relative_paths_are_read_as_stored(tmp_path, monkeypatch, session_factory, add_driver, load_driver):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "uploads" / "licenses").mkdir(parents=True)
    (tmp_path / "uploads" / "insurance").mkdir(parents=True)
    (tmp_path / "uploads" / "licenses" / "licenseDoc-7.jpg").write_bytes(b"\xff\xd8 license")
    (tmp_path / "uploads" / "insurance" / "insuranceDoc-7.pdf").write_bytes(b"%PDF-1.4 insurance")
    driver_id = await add_driver(
        license_path="uploads/licenses/licenseDoc-7.jpg",
        insurance_path="uploads/insurance/insuranceDoc-7.pdf",
    )

    oracle = ScriptedOracle()
    runner = build_batch_runner(session_factory, Settings(OPENAI_API_KEY="sk-test"), oracle=oracle)
    summary = await runner.run_once(trigger=PassTrigger.MANUAL)

    driver = await load_driver(driver_id)
    assert driver.validation_status == ValidationStatus.VALIDATED, driver.validation_notes
    assert summary.validated == 1
    assert sorted(call["path"] for call in oracle.calls) == [
        "uploads/insurance/insuranceDoc-7.pdf",
        "uploads/licenses/licenseDoc-7.jpg",
    ]


class EngineSpy:
    """Records disposal of the engine a pass creates for itself."""

    def __init__(self, engine):
        self.engine = engine
        self.disposed = False

    async def dispose(self):
        self.disposed = True
        await self.engine.dispose()


@pytest.fixture
def fresh_engines(monkeypatch):
    from driver_onboarding.db import session as db_session

    created = []
    real_factory = db_session.make_session_factory

    def _make_session_factory(database_url=None):
        factory, engine = real_factory(database_url)
        spy = EngineSpy(engine)
        created.append((database_url, spy))
        return factory, spy

    monkeypatch.setattr(db_session, "make_session_factory", _make_session_factory)
    return created


async def test_pass_without_factory_disposes_its_engine(tmp_path, fresh_engines):
    url = f"sqlite+aiosqlite:///{tmp_path / 'own.db'}"

    summary = await run_validation_pass(
        trigger=PassTrigger.SCHEDULED,
        source=Settings(DATABASE_URL_OVERRIDE=url, OPENAI_API_KEY=""),
    )

    assert summary.status == PassStatus.DISABLED
    [(database_url, engine)] = fresh_engines
    assert database_url == url
    assert engine.disposed


async def test_pass_without_factory_queries_configured_database(tmp_path, fresh_engines):
    url = f"sqlite+aiosqlite:///{tmp_path / 'own.db'}"
    engine = create_async_engine(url)
    await create_tables(engine)
    await engine.dispose()

    summary = await run_validation_pass(
        trigger=PassTrigger.SCHEDULED,
        source=Settings(DATABASE_URL_OVERRIDE=url, OPENAI_API_KEY="sk-test"),
    )

    assert summary.status == PassStatus.NO_WORK
    [(_, own_engine)] = fresh_engines
    assert own_engine.disposed


def test_worker_imposes_no_time_limit_on_a_pass():
    import celeryconfig

    assert getattr(celeryconfig, "task_time_limit", None) is None
    assert getattr(celeryconfig, "task_soft_time_limit", None) is None
