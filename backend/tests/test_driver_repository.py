from datetime import datetime, timedelta, timezone

import pytest

from driver_onboarding.core.constants import ValidationStatus
from driver_onboarding.repositories import drivers as driver_repository
from driver_onboarding.validation.store import RecordStore

pytestmark = pytest.mark.anyio

NOW = datetime.now(timezone.utc)


async def test_select_pending_newest_first(session_factory, add_driver):
    oldest = await add_driver(created_at=NOW - timedelta(hours=2))
    newest = await add_driver(created_at=NOW - timedelta(seconds=5))
    middle = await add_driver(created_at=NOW - timedelta(minutes=30))
    await add_driver(created_at=NOW, status=ValidationStatus.VALIDATED.value)

    async with session_factory() as session:
        rows = await driver_repository.select_pending(session)

    assert [row.id for row in rows] == [newest, middle, oldest]


async def test_select_pending_since(session_factory, add_driver):
    await add_driver(created_at=NOW - timedelta(minutes=5))
    recent = await add_driver(created_at=NOW - timedelta(seconds=10))

    async with session_factory() as session:
        rows = await driver_repository.select_pending(session, since=NOW - timedelta(minutes=1))

    assert [row.id for row in rows] == [recent]


async def test_update_only_touches_pending_rows(session_factory, add_driver, load_driver):
    driver_id = await add_driver()
    store = RecordStore(session_factory)

    first = await store.update_validation(
        driver_id, status=ValidationStatus.FAILED, notes="License: expired", validated_at=NOW
    )
    second = await store.update_validation(
        driver_id, status=ValidationStatus.VALIDATED, notes="", validated_at=NOW
    )

    assert (first.ok, first.rows_updated) == (True, 1)
    assert (second.ok, second.rows_updated) == (True, 0)

    driver = await load_driver(driver_id)
    assert driver.validation_status == ValidationStatus.FAILED
    assert driver.validation_notes == "License: expired"


async def test_write_error_is_returned(empty_session_factory):
    result = await RecordStore(empty_session_factory).update_validation(
        1, status=ValidationStatus.VALIDATED, notes="", validated_at=NOW
    )

    assert result.ok is False
    assert "drivers" in result.error


async def test_select_returns_detached_snapshots(session_factory, add_driver):
    driver_id = await add_driver(first_name="Ada", last_name="Lovelace")

    submissions = await RecordStore(session_factory).select_pending()

    assert submissions[0].id == driver_id
    assert submissions[0].expected_name == "Ada Lovelace"


async def test_reset_sends_driver_back_to_pending(session_factory, add_driver, load_driver):
    driver_id = await add_driver()
    await RecordStore(session_factory).update_validation(
        driver_id, status=ValidationStatus.FAILED, notes="License: expired", validated_at=NOW
    )

    async with session_factory() as session:
        async with session.begin():
            driver = await driver_repository.reset_validation(session, driver_id)

    assert driver.validation_status == ValidationStatus.PENDING
    reloaded = await load_driver(driver_id)
    assert reloaded.validation_status == ValidationStatus.PENDING
    assert reloaded.validation_notes is None
    assert reloaded.validated_at is not None


async def test_reset_unknown_driver(session_factory):
    async with session_factory() as session:
        assert await driver_repository.reset_validation(session, 999) is None
