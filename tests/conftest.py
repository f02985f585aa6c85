"""全局 pytest 配置 -- 可控时钟、记录型 Notifier、内存/临时 SQLite 存储 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from focusdesk.core.collection import TaskCollection
from focusdesk.core.store.memory_store import MemoryTaskRecordStore
from focusdesk.core.store.sqlite_store import SqliteTaskRecordStore


class FakeClock:
    """手动推进的时钟"""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingNotifier:
    """记录所有提示的 Notifier"""

    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def collection(clock: FakeClock) -> TaskCollection:
    """使用可控时钟的空集合"""
    return TaskCollection("owner-1", clock=clock)


@pytest.fixture
def memory_store() -> MemoryTaskRecordStore:
    return MemoryTaskRecordStore()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> AsyncGenerator[SqliteTaskRecordStore, None]:
    """提供已初始化的临时 SQLite 存储"""
    store = await SqliteTaskRecordStore.open(tmp_path / "sqlite" / "test.db")
    yield store
    await store.close()
