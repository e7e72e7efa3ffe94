"""Shared fixtures: temporary SQLite record store, documents on disk, driver rows."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from driver_onboarding.core.constants import ValidationStatus
from driver_onboarding.db.models import Base, Driver


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'drivers.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture
async def empty_session_factory(tmp_path):
    """A database with no tables, so every query fails."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def documents(tmp_path):
    docs_dir = tmp_path / "uploads"
    docs_dir.mkdir()
    license_doc = docs_dir / "licenseDoc-1.jpg"
    license_doc.write_bytes(b"\xff\xd8\xff\xe0 license scan")
    insurance_doc = docs_dir / "insuranceDoc-1.pdf"
    insurance_doc.write_bytes(b"%PDF-1.4 insurance card")
    return license_doc, insurance_doc


@pytest.fixture
def add_driver(session_factory, documents):
    """Insert a driver row and return its id."""
    counter = itertools.count(1)
    license_doc, insurance_doc = documents

    async def _add(
        *,
        first_name: str = "Jane",
        last_name: str = "Doe",
        created_at: datetime | None = None,
        status: str = ValidationStatus.PENDING.value,
        license_path: str | None = None,
        insurance_path: str | None = None,
        license_expiry: str = "2099-01-01",
        insurance_expiry: str = "2099-06-01",
    ) -> int:
        n = next(counter)
        driver = Driver(
            first_name=first_name,
            last_name=last_name,
            email=f"driver{n}@example.com",
            phone="555-0100",
            license_doc_path=license_path if license_path is not None else str(license_doc),
            license_expiry_date=license_expiry,
            insurance_doc_path=insurance_path if insurance_path is not None else str(insurance_doc),
            insurance_expiry_date=insurance_expiry,
            validation_status=status,
            created_at=created_at or datetime.now(timezone.utc),
        )
        async with session_factory() as session:
            async with session.begin():
                session.add(driver)
        return driver.id

    return _add


@pytest.fixture
def load_driver(session_factory):
    async def _load(driver_id: int) -> Driver:
        async with session_factory() as session:
            return await session.get(Driver, driver_id)

    return _load
