"""Relational patient store backed by SQLAlchemy's asyncio extension."""

from dataclasses import replace
from datetime import date

from sqlalchemy import Date, String, Text, UniqueConstraint, delete, exists, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from app.models.patient import Patient
from app.services.store import DuplicateEmailError, PatientMissingError, StoreError, cuid
from app.utils.logging import get_logger

logger = get_logger(__name__)


EMAIL_CONSTRAINT = "uq_patient_email"


class Base(DeclarativeBase):
    pass


class PatientRow(Base):
    __tablename__ = "patient"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    registered_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (UniqueConstraint("email", name=EMAIL_CONSTRAINT),)


_COLUMNS = (
    PatientRow.id,
    PatientRow.name,
    PatientRow.email,
    PatientRow.address,
    PatientRow.date_of_birth,
    PatientRow.registered_date,
)


def _to_patient(row) -> Patient:
    return Patient(
        id=row.id,
        name=row.name,
        email=row.email,
        address=row.address,
        date_of_birth=row.date_of_birth,
        registered_date=row.registered_date,
    )


def _is_email_conflict(error: IntegrityError) -> bool:
    """Tell a unique-email violation apart from other integrity failures."""
    # SQLite names the column, PostgreSQL and MySQL name the constraint
    message = str(error.orig)
    return EMAIL_CONSTRAINT in message or "patient.email" in message


def _values(patient: Patient) -> dict:
    return {
        "name": patient.name,
        "email": patient.email,
        "address": patient.address,
        "date_of_birth": patient.date_of_birth,
        "registered_date": patient.registered_date,
    }


class SqlPatientStore:
    """Patient store on a relational table with a unique index on email.

    The unique index is what keeps concurrent writers from storing the same
    email twice; a violation surfaces as DuplicateEmailError.
    """

    def __init__(self, database_url: str, echo: bool = False, engine: AsyncEngine | None = None):
        """Initialize the store.

        Args:
            database_url: Async SQLAlchemy URL, e.g. sqlite+aiosqlite:///./patients.db
            echo: Log every SQL statement
            engine: Pre-built engine, mainly for tests
        """
        self.database_url = database_url
        if engine is None:
            kwargs = {"echo": echo, "pool_pre_ping": True}
            if database_url.endswith(":memory:"):
                # one shared connection, otherwise every checkout sees an empty database
                kwargs = {"echo": echo, "poolclass": StaticPool}
            engine = create_async_engine(database_url, **kwargs)
        self.engine = engine

    async def open(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialize patient table: {e}") from e
        logger.info(f"Using SQL patient store at {self.engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        await self.engine.dispose()

    async def find_all(self) -> list[Patient]:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(select(*_COLUMNS))
                return [_to_patient(row) for row in result]
        except SQLAlchemyError as e:
            raise StoreError(f"find_all failed: {e}") from e

    async def find_by_id(self, patient_id: str) -> Patient | None:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(select(*_COLUMNS).where(PatientRow.id == patient_id))
                row = result.one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"find_by_id failed: {e}") from e
        return _to_patient(row) if row else None

    async def exists_by_email(self, email: str) -> bool:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(select(exists().where(PatientRow.email == email)))
                return bool(result.scalar())
        except SQLAlchemyError as e:
            raise StoreError(f"exists_by_email failed: {e}") from e

    async def save(self, patient: Patient) -> Patient:
        stored = replace(patient, id=patient.id or cuid())
        try:
            async with self.engine.begin() as conn:
                if patient.id is None:
                    await conn.execute(insert(PatientRow).values(id=stored.id, **_values(stored)))
                else:
                    result = await conn.execute(
                        update(PatientRow).where(PatientRow.id == stored.id).values(**_values(stored))
                    )
                    if result.rowcount == 0:
                        raise PatientMissingError(stored.id)
        except IntegrityError as e:
            if _is_email_conflict(e):
                raise DuplicateEmailError(stored.email) from e
            raise StoreError(f"save failed: {e}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"save failed: {e}") from e
        return stored

    async def delete(self, patient: Patient) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(delete(PatientRow).where(PatientRow.id == patient.id))
        except SQLAlchemyError as e:
            raise StoreError(f"delete failed: {e}") from e
