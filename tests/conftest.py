"""
Shared fixtures.

Store-level tests run against an in-memory SQLite database; service tests
that only exercise orchestration use mocked sessions and repositories.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.pop("RESEND_API_KEY", None)

import io  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from docx import Document  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from sat_portal.core.auth import CurrentUser  # noqa: E402
from sat_portal.core.database import Base  # noqa: E402
from sat_portal.modules.store import models as store_models  # noqa: E402, F401
from sat_portal.modules.users import models as user_models  # noqa: E402, F401
from sat_portal.modules.users.models import UserRole  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """A session bound to a fresh in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    return redis


@pytest.fixture
def student():
    return CurrentUser(
        id=str(uuid4()),
        name="Ani Lestari",
        role=UserRole.STUDENT,
        identifier="2010511001",
        email="ani@student.example.ac.id",
    )


@pytest.fixture
def lecturer_user():
    return CurrentUser(
        id=str(uuid4()),
        name="Dr. Budi Santoso",
        role=UserRole.LECTURER,
        identifier="198001012005011001",
        email="budi@example.ac.id",
    )


class FakeStorage:
    """Records uploads; ``fail`` lists filenames whose upload should fail."""

    def __init__(self, fail: tuple[str, ...] = ()):
        self.fail = set(fail)
        self.uploads: list[tuple[str, str]] = []

    async def upload(self, content, filename, folder, content_type=None):
        if filename in self.fail:
            return None
        self.uploads.append((folder, filename))
        return f"https://files.example.test/{folder}/{filename}"


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def failing_storage():
    return FakeStorage(fail=("laporan.pdf", "naskah.pdf"))


def _build_docx(*paragraphs: str, split_runs: tuple[str, ...] = ()) -> bytes:
    """
    Build a .docx in memory.

    Each entry of ``split_runs`` becomes one paragraph whose text is spread
    over two runs at its midpoint, the way Word often stores edited text.
    """
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    for text in split_runs:
        paragraph = document.add_paragraph()
        middle = len(text) // 2
        paragraph.add_run(text[:middle])
        paragraph.add_run(text[middle:])
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_docx():
    """Factory building .docx templates in memory."""
    return _build_docx


@pytest.fixture
def docx_template():
    return _build_docx(
        "Nomor: {no_surat}",
        "Kepada Yth. {nama} ({nim})",
        "Judul: {judul}",
        "Hari/Tanggal: {hari}, {tgl}",
        "Waktu: {waktu} di {ruang}",
        "Pembimbing: {dosen1} dan {dosen2}",
        "Penguji: {dosen3} dan {dosen4}",
    )
