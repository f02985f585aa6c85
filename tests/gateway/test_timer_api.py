"""专注计时器 API 测试"""

import asyncio

from httpx import AsyncClient


class TestTimerApi:
    async def test_initial_snapshot(self, client: AsyncClient):
        resp = await client.get("/api/timer")
        assert resp.status_code == 200
        data = resp.json()
        assert data["phase"] == "focus"
        assert data["clock"] == "25:00"
        assert data["remaining_seconds"] == 1500
        assert data["is_running"] is False
        assert data["sessions_completed"] == 0

    async def test_start_pause(self, client: AsyncClient):
        resp = await client.post("/api/timer/start")
        assert resp.json()["is_running"] is True

        # tick_interval_s = 0.01
        await asyncio.sleep(0.1)

        resp = await client.post("/api/timer/pause")
        paused = resp.json()
        assert paused["is_running"] is False
        assert paused["remaining_seconds"] < 1500

        await asyncio.sleep(0.05)
        resp = await client.get("/api/timer")
        assert resp.json()["remaining_seconds"] == paused["remaining_seconds"]

    async def test_reset(self, client: AsyncClient):
        await client.post("/api/timer/start")
        await asyncio.sleep(0.05)
        resp = await client.post("/api/timer/reset")
        data = resp.json()
        assert data["is_running"] is False
        assert data["remaining_seconds"] == 1500
        assert data["phase"] == "focus"

    async def test_set_durations(self, client: AsyncClient):
        resp = await client.put(
            "/api/timer/durations", json={"focus_minutes": 10, "break_minutes": 0}
        )
        data = resp.json()
        assert data["focus_minutes"] == 10
        assert data["break_minutes"] == 1
        assert data["clock"] == "10:00"

    async def test_timers_are_per_owner(self, client: AsyncClient):
        await client.put(
            "/api/timer/durations", json={"focus_minutes": 10}, headers={"X-Owner-ID": "alice"}
        )
        resp = await client.get("/api/timer", headers={"X-Owner-ID": "bob"})
        assert resp.json()["focus_minutes"] == 25
