"""TaskRecordStore 的 SQLite 实现

时间字段以定长 ISO 8601 字符串（微秒精度）存储，字符串顺序即时间顺序；
aiosqlite.Error 统一包装为 PersistenceError。
"""

from datetime import datetime
from pathlib import Path

import aiosqlite
import structlog

from ..exceptions import PersistenceError
from ..models.task import Task
from .sqlite_init import init_db

log = structlog.get_logger()


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat(timespec="microseconds")


class SqliteTaskRecordStore:
    """TaskRecordStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    @property
    def conn(self) -> aiosqlite.Connection:
        return self._conn

    @classmethod
    async def open(cls, db_path: str | Path) -> "SqliteTaskRecordStore":
        """打开数据库并初始化 schema

        Args:
            db_path: SQLite 数据库文件路径
        """
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(db_path))
        conn.row_factory = aiosqlite.Row
        await init_db(conn)
        return cls(conn)

    async def create_record(self, task: Task) -> None:
        """创建任务记录"""
        try:
            await self._conn.execute(
                """
                INSERT INTO tasks (task_id, owner_id, title, description, status,
                                   priority, due_date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.task_id,
                    task.owner_id,
                    task.title,
                    task.description,
                    task.status.value,
                    task.priority.value,
                    _iso(task.due_date),
                    _iso(task.created_at),
                    _iso(task.updated_at),
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            raise PersistenceError("create", e) from e

    async def update_record(self, task: Task) -> None:
        """以本地最新状态覆盖任务记录"""
        try:
            cursor = await self._conn.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, status = ?, priority = ?,
                    due_date = ?, updated_at = ?
                WHERE task_id = ?
                """,
                (
                    task.title,
                    task.description,
                    task.status.value,
                    task.priority.value,
                    _iso(task.due_date),
                    _iso(task.updated_at),
                    task.task_id,
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            raise PersistenceError("update", e) from e
        if cursor.rowcount == 0:
            raise PersistenceError("update", LookupError(f"no record for {task.task_id}"))

    async def delete_record(self, task_id: str) -> None:
        """删除任务记录"""
        try:
            await self._conn.execute("DELETE FROM tasks WHERE task_id = ?", (task_id,))
            await self._conn.commit()
        except aiosqlite.Error as e:
            raise PersistenceError("delete", e) from e

    async def list_records(self, owner_id: str) -> list[Task]:
        """查询指定 owner 的全部任务，按创建顺序"""
        try:
            cursor = await self._conn.execute(
                "SELECT * FROM tasks WHERE owner_id = ? ORDER BY created_at ASC, rowid ASC",
                (owner_id,),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("list", e) from e
        return [self._row_to_task(row) for row in rows]

    async def ping(self) -> bool:
        """数据库连通性检查"""
        try:
            cursor = await self._conn.execute("SELECT 1")
            await cursor.fetchone()
            return True
        except Exception as e:
            log.debug("sqlite_ping_failed", error=str(e))
            return False

    async def close(self) -> None:
        await self._conn.close()

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            task_id=row["task_id"],
            owner_id=row["owner_id"],
            title=row["title"],
            description=row["description"],
            status=row["status"],
            priority=row["priority"],
            due_date=datetime.fromisoformat(row["due_date"]) if row["due_date"] else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
