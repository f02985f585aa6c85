"""通知协作方

Notifier 是 collection/计时器报告结果的唯一出口（success / error）。
NotificationHub 为每个 owner 维护订阅队列（SSE 推送）和最近的历史记录。
"""

import asyncio
from collections import defaultdict, deque
from datetime import UTC, datetime
from typing import Protocol

import structlog
from ulid import ULID

from .models.notification import Notification, NotificationLevel

log = structlog.get_logger()


class Notifier(Protocol):
    """非阻塞用户提示接口"""

    def success(self, message: str) -> None:
        """成功提示"""
        ...

    def error(self, message: str) -> None:
        """错误提示"""
        ...


class NotificationHub:
    """通知广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = 100, history_size: int = 50) -> None:
        # owner_id -> set of asyncio.Queue
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)
        self._history: dict[str, deque[Notification]] = defaultdict(
            lambda: deque(maxlen=history_size)
        )
        self._queue_maxsize = queue_maxsize

    def subscribe(self, owner_id: str) -> asyncio.Queue:
        """订阅指定 owner 的通知流

        Returns:
            asyncio.Queue 实例，新通知会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers[owner_id].add(queue)
        return queue

    def unsubscribe(self, owner_id: str, queue: asyncio.Queue) -> None:
        """取消订阅"""
        self._subscribers[owner_id].discard(queue)
        if not self._subscribers[owner_id]:
            del self._subscribers[owner_id]

    def publish(self, owner_id: str, level: NotificationLevel, message: str) -> Notification:
        """记录并广播一条通知

        队列已满的订阅者会被移除。
        """
        notification = Notification(
            notification_id=str(ULID()),
            owner_id=owner_id,
            level=level,
            message=message,
            ts=datetime.now(UTC),
        )
        self._history[owner_id].append(notification)

        dead_queues = []
        for queue in self._subscribers.get(owner_id, set()):
            try:
                queue.put_nowait(notification)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        for q in dead_queues:
            self._subscribers[owner_id].discard(q)
        if owner_id in self._subscribers and not self._subscribers[owner_id]:
            del self._subscribers[owner_id]

        log.debug("notification_published", owner_id=owner_id, level=level)
        return notification

    def recent(self, owner_id: str) -> list[Notification]:
        """最近的通知（旧 -> 新）"""
        return list(self._history.get(owner_id, ()))

    def for_owner(self, owner_id: str) -> "OwnerNotifier":
        """返回绑定到 owner 的 Notifier"""
        return OwnerNotifier(self, owner_id)


class OwnerNotifier:
    """绑定到单个 owner 的 Notifier 实现"""

    def __init__(self, hub: NotificationHub, owner_id: str) -> None:
        self._hub = hub
        self.owner_id = owner_id

    def success(self, message: str) -> None:
        self._hub.publish(self.owner_id, NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> None:
        self._hub.publish(self.owner_id, NotificationLevel.ERROR, message)
