"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Each test gets a fresh schema on a single shared connection (StaticPool);
SAVEPOINTs are enabled so the submission pipeline behaves as on PostgreSQL.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SMTP_FROM_EMAIL", "")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from safetyhub.database import Base, enable_sqlite_savepoints, get_db  # noqa: E402
from safetyhub.main import app  # noqa: E402
from safetyhub.models import *  # noqa: F401,F403,E402 — register all models with metadata
from safetyhub.models.checklist import Checklist, ChecklistItem  # noqa: E402
from safetyhub.models.user import Role, User  # noqa: E402
from safetyhub.utils.jwt import create_access_token  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def roles(db: AsyncSession) -> dict[str, Role]:
    """기본 4개 역할을 생성합니다."""
    result = {}
    for name, level in [("admin", 1), ("manager", 2), ("inspector", 3), ("worker", 4)]:
        role = Role(name=name, level=level)
        db.add(role)
        result[name] = role
    await db.commit()
    return result


async def _make_user(db: AsyncSession, role: Role, username: str, email: str | None = None) -> User:
    user = User(role_id=role.id, username=username, full_name=f"Test {username.title()}", email=email)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, roles) -> User:
    return await _make_user(db, roles["admin"], "admin", "admin@test.com")


@pytest_asyncio.fixture
async def manager_user(db: AsyncSession, roles) -> User:
    return await _make_user(db, roles["manager"], "manager", "manager@test.com")


@pytest_asyncio.fixture
async def inspector_user(db: AsyncSession, roles) -> User:
    return await _make_user(db, roles["inspector"], "inspector", "inspector@test.com")


@pytest_asyncio.fixture
async def other_inspector(db: AsyncSession, roles) -> User:
    return await _make_user(db, roles["inspector"], "inspector2")


@pytest_asyncio.fixture
async def worker_user(db: AsyncSession, roles) -> User:
    return await _make_user(db, roles["worker"], "worker")


async def make_checklist(
    db: AsyncSession,
    items: list[tuple[str, bool]],
    name: str = "Fire Safety",
    category: str = "fire",
    is_active: bool = True,
) -> Checklist:
    """(문구, 치명 여부) 목록으로 체크리스트를 생성합니다."""
    checklist = Checklist(name=name, category=category, is_active=is_active)
    db.add(checklist)
    await db.flush()
    for order, (text, critical) in enumerate(items):
        db.add(ChecklistItem(checklist_id=checklist.id, text=text, critical=critical, sort_order=order))
    await db.commit()
    await db.refresh(checklist, ["items"])
    return checklist


@pytest_asyncio.fixture
async def checklist(db: AsyncSession) -> Checklist:
    """3개 항목 체크리스트 — 1개 일반, 2개 치명."""
    return await make_checklist(
        db,
        [
            ("Exit signs illuminated", False),
            ("Extinguisher pressure in green zone", True),
            ("Fire doors unobstructed", True),
        ],
    )


def make_token(user: User, role_name: str = "") -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": role_name})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user, "admin")


@pytest.fixture
def manager_token(manager_user) -> str:
    return make_token(manager_user, "manager")


@pytest.fixture
def inspector_token(inspector_user) -> str:
    return make_token(inspector_user, "inspector")


@pytest.fixture
def other_inspector_token(other_inspector) -> str:
    return make_token(other_inspector, "inspector")


@pytest.fixture
def worker_token(worker_user) -> str:
    return make_token(worker_user, "worker")


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
