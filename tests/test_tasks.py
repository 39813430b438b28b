"""업무 API 테스트: CRUD, 상태 규칙, 통계, 기한 초과/예정, 대시보드, 메모로부터 생성.

Task API tests: Creation with memo/video references, rank-based priority
sorting, the completed_at status rule, complete/reopen, statistics,
overdue and upcoming queries, the dashboard, create-from-memo and
ownership isolation.
"""

import uuid
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from tests.conftest import auth_header, create_memo, create_task, save_video

TASKS = "/api/tasks"


def _iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


# ===== Create =====

class TestCreateTask:
    """업무 생성 테스트."""

    async def test_create_defaults(self, client: AsyncClient, alice):
        res = await client.post(TASKS, json={"title": "Write summary"}, headers=auth_header(alice["token"]))
        assert res.status_code == 201
        task = res.json()["data"]["task"]
        assert task["title"] == "Write summary"
        assert task["priority"] == "medium"
        assert task["status"] == "pending"
        assert task["completed_at"] is None
        assert task["due_date"] is None
        assert task["user_id"] == alice["user"]["id"]

    async def test_create_with_references(self, client: AsyncClient, alice):
        token = alice["token"]
        video = await save_video(client, token)
        memo = await create_memo(client, token, videoId=video["id"])
        task = await create_task(
            client, token, memoId=memo["id"], videoId=video["id"], priority="urgent", dueDate=_iso(timedelta(days=2))
        )
        assert task["memo_id"] == memo["id"]
        assert task["video_id"] == video["id"]
        assert task["priority"] == "urgent"
        assert task["due_date"] is not None

    async def test_reference_to_other_users_memo(self, client: AsyncClient, alice, bob):
        memo = await create_memo(client, alice["token"])
        res = await client.post(
            TASKS, json={"title": "x", "memoId": memo["id"]}, headers=auth_header(bob["token"])
        )
        assert res.status_code == 404
        assert res.json()["error"]["message"] == "Memo not found"

    async def test_reference_to_other_users_video(self, client: AsyncClient, alice, bob):
        video = await save_video(client, alice["token"])
        res = await client.post(
            TASKS, json={"title": "x", "videoId": video["id"]}, headers=auth_header(bob["token"])
        )
        assert res.status_code == 404
        assert res.json()["error"]["message"] == "Video not found"

    async def test_invalid_priority(self, client: AsyncClient, alice):
        res = await client.post(
            TASKS, json={"title": "x", "priority": "critical"}, headers=auth_header(alice["token"])
        )
        assert res.status_code == 422
        assert res.json()["error"]["details"][0]["field"] == "priority"

    async def test_title_too_long(self, client: AsyncClient, alice):
        res = await client.post(TASKS, json={"title": "x" * 501}, headers=auth_header(alice["token"]))
        assert res.status_code == 422


# ===== List =====

class TestListTasks:
    """업무 목록/필터/정렬 테스트."""

    async def test_sort_by_priority_rank(self, client: AsyncClient, alice):
        """우선순위 정렬은 문자열 순서가 아닌 순위 순서."""
        token = alice["token"]
        for priority in ("medium", "urgent", "low", "high"):
            await create_task(client, token, title=priority, priority=priority)

        res = await client.get(TASKS, params={"sort": "priority", "order": "desc"}, headers=auth_header(token))
        assert [t["priority"] for t in res.json()["data"]["items"]] == ["urgent", "high", "medium", "low"]

        res = await client.get(TASKS, params={"sort": "priority", "order": "asc"}, headers=auth_header(token))
        assert [t["priority"] for t in res.json()["data"]["items"]] == ["low", "medium", "high", "urgent"]

    async def test_sort_by_due_date(self, client: AsyncClient, alice):
        token = alice["token"]
        await create_task(client, token, title="later", dueDate=_iso(timedelta(days=5)))
        await create_task(client, token, title="sooner", dueDate=_iso(timedelta(days=1)))

        res = await client.get(TASKS, params={"sort": "due_date", "order": "asc"}, headers=auth_header(token))
        assert [t["title"] for t in res.json()["data"]["items"]] == ["sooner", "later"]

    async def test_filters(self, client: AsyncClient, alice):
        token = alice["token"]
        video = await save_video(client, token)
        high = await create_task(client, token, title="high", priority="high")
        on_video = await create_task(client, token, title="video", videoId=video["id"])
        done = await create_task(client, token, title="done")
        await client.post(f"{TASKS}/{done['id']}/complete", headers=auth_header(token))

        res = await client.get(TASKS, params={"priority": "high"}, headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["items"]] == [high["id"]]

        res = await client.get(TASKS, params={"videoId": video["id"]}, headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["items"]] == [on_video["id"]]

        res = await client.get(TASKS, params={"status": "completed"}, headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["items"]] == [done["id"]]

        res = await client.get(TASKS, params={"status": "pending"}, headers=auth_header(token))
        assert res.json()["data"]["pagination"]["total"] == 2

    async def test_overdue_filter(self, client: AsyncClient, alice):
        token = alice["token"]
        late = await create_task(client, token, title="late", dueDate=_iso(-timedelta(days=1)))
        await create_task(client, token, title="future", dueDate=_iso(timedelta(days=1)))
        await create_task(client, token, title="no date")

        res = await client.get(TASKS, params={"overdue": "true"}, headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["items"]] == [late["id"]]

    async def test_invalid_status_filter(self, client: AsyncClient, alice):
        res = await client.get(TASKS, params={"status": "done"}, headers=auth_header(alice["token"]))
        assert res.status_code == 422
        assert res.json()["error"]["details"][0]["field"] == "status"

    async def test_search(self, client: AsyncClient, alice):
        """제목/설명 검색."""
        token = alice["token"]
        by_title = await create_task(client, token, title="Edit the intro")
        by_description = await create_task(client, token, title="Other", description="rework INTRO music")
        await create_task(client, token, title="Unrelated")

        res = await client.get(f"{TASKS}/search", params={"q": "intro"}, headers=auth_header(token))
        found = {t["id"] for t in res.json()["data"]["items"]}
        assert found == {by_title["id"], by_description["id"]}


# ===== Status rule =====

class TestStatusTransitions:
    """completed_at 규칙 테스트."""

    async def test_update_to_completed_stamps_completed_at(self, client: AsyncClient, alice):
        task = await create_task(client, alice["token"])
        res = await client.put(
            f"{TASKS}/{task['id']}", json={"status": "completed"}, headers=auth_header(alice["token"])
        )
        assert res.status_code == 200
        updated = res.json()["data"]["task"]
        assert updated["status"] == "completed"
        assert updated["completed_at"] is not None

    async def test_leaving_completed_clears_completed_at(self, client: AsyncClient, alice):
        task = await create_task(client, alice["token"])
        path = f"{TASKS}/{task['id']}"
        await client.put(path, json={"status": "completed"}, headers=auth_header(alice["token"]))

        res = await client.put(path, json={"status": "in_progress"}, headers=auth_header(alice["token"]))
        updated = res.json()["data"]["task"]
        assert updated["status"] == "in_progress"
        assert updated["completed_at"] is None

    async def test_update_without_status_keeps_completed_at(self, client: AsyncClient, alice):
        task = await create_task(client, alice["token"])
        path = f"{TASKS}/{task['id']}"
        await client.post(f"{path}/complete", headers=auth_header(alice["token"]))

        res = await client.put(path, json={"title": "Renamed"}, headers=auth_header(alice["token"]))
        updated = res.json()["data"]["task"]
        assert updated["title"] == "Renamed"
        assert updated["status"] == "completed"
        assert updated["completed_at"] is not None

    async def test_completed_at_alone_ignored_on_open_task(self, client: AsyncClient, alice):
        """미완료 업무에 completedAt만 보내면 무시."""
        task = await create_task(client, alice["token"])
        res = await client.put(
            f"{TASKS}/{task['id']}",
            json={"completedAt": "2020-01-01T00:00:00Z"},
            headers=auth_header(alice["token"]),
        )
        assert res.status_code == 200
        updated = res.json()["data"]["task"]
        assert updated["status"] == "pending"
        assert updated["completed_at"] is None

    async def test_completed_at_alone_corrects_completed_task(self, client: AsyncClient, alice):
        """완료된 업무는 completedAt만으로 완료 시각 수정 가능."""
        task = await create_task(client, alice["token"])
        path = f"{TASKS}/{task['id']}"
        await client.post(f"{path}/complete", headers=auth_header(alice["token"]))

        res = await client.put(path, json={"completedAt": "2020-01-01T00:00:00Z"}, headers=auth_header(alice["token"]))
        updated = res.json()["data"]["task"]
        assert updated["status"] == "completed"
        assert updated["completed_at"].startswith("2020-01-01T00:00:00")

    async def test_recompleting_keeps_original_completed_at(self, client: AsyncClient, alice):
        """이미 완료된 업무를 다시 완료해도 completed_at 유지."""
        task = await create_task(client, alice["token"])
        path = f"{TASKS}/{task['id']}"
        headers = auth_header(alice["token"])
        res = await client.put(path, json={"status": "completed"}, headers=headers)
        first = res.json()["data"]["task"]["completed_at"]

        res = await client.put(path, json={"status": "completed"}, headers=headers)
        assert res.json()["data"]["task"]["completed_at"] == first
        res = await client.post(f"{path}/complete", headers=headers)
        assert res.json()["data"]["task"]["completed_at"] == first

    async def test_complete_and_reopen(self, client: AsyncClient, alice):
        task = await create_task(client, alice["token"])
        path = f"{TASKS}/{task['id']}"

        res = await client.post(f"{path}/complete", headers=auth_header(alice["token"]))
        assert res.status_code == 200
        assert res.json()["data"]["task"]["status"] == "completed"
        assert res.json()["data"]["task"]["completed_at"] is not None

        res = await client.post(f"{path}/reopen", headers=auth_header(alice["token"]))
        assert res.json()["data"]["task"]["status"] == "pending"
        assert res.json()["data"]["task"]["completed_at"] is None

    async def test_clear_due_date(self, client: AsyncClient, alice):
        """dueDate: null 이면 마감일 제거."""
        task = await create_task(client, alice["token"], dueDate=_iso(timedelta(days=1)))
        res = await client.put(
            f"{TASKS}/{task['id']}", json={"dueDate": None}, headers=auth_header(alice["token"])
        )
        assert res.json()["data"]["task"]["due_date"] is None

    async def test_delete(self, client: AsyncClient, alice):
        task = await create_task(client, alice["token"])
        res = await client.delete(f"{TASKS}/{task['id']}", headers=auth_header(alice["token"]))
        assert res.status_code == 200
        assert res.json()["data"]["message"] == "Task deleted successfully"
        res = await client.get(f"{TASKS}/{task['id']}", headers=auth_header(alice["token"]))
        assert res.status_code == 404


# ===== Stats / Overdue / Upcoming / Dashboard =====

class TestTaskViews:
    """통계, 기한 초과, 예정, 대시보드 테스트."""

    async def test_stats(self, client: AsyncClient, alice):
        token = alice["token"]
        await create_task(client, token, title="pending")
        overdue = await create_task(client, token, title="overdue", dueDate=_iso(-timedelta(hours=2)))
        done = await create_task(client, token, title="done", dueDate=_iso(-timedelta(days=3)))
        cancelled = await create_task(client, token, title="cancelled")
        await client.post(f"{TASKS}/{done['id']}/complete", headers=auth_header(token))
        await client.put(f"{TASKS}/{cancelled['id']}", json={"status": "cancelled"}, headers=auth_header(token))
        await client.put(f"{TASKS}/{overdue['id']}", json={"status": "in_progress"}, headers=auth_header(token))

        res = await client.get(f"{TASKS}/stats", headers=auth_header(token))
        assert res.status_code == 200
        assert res.json()["data"]["stats"] == {
            "total": 4,
            "pending": 1,
            "in_progress": 1,
            "completed": 1,
            "cancelled": 1,
            "overdue": 1,
        }

    async def test_stats_empty(self, client: AsyncClient, alice):
        res = await client.get(f"{TASKS}/stats", headers=auth_header(alice["token"]))
        stats = res.json()["data"]["stats"]
        assert stats["total"] == 0
        assert stats["overdue"] == 0

    async def test_overdue_oldest_first(self, client: AsyncClient, alice):
        token = alice["token"]
        recent = await create_task(client, token, title="recent", dueDate=_iso(-timedelta(hours=1)))
        oldest = await create_task(client, token, title="oldest", dueDate=_iso(-timedelta(days=4)))
        done = await create_task(client, token, title="done", dueDate=_iso(-timedelta(days=9)))
        await client.post(f"{TASKS}/{done['id']}/complete", headers=auth_header(token))

        res = await client.get(f"{TASKS}/overdue", headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["tasks"]] == [oldest["id"], recent["id"]]

    async def test_upcoming_window(self, client: AsyncClient, alice):
        token = alice["token"]
        soon = await create_task(client, token, title="soon", dueDate=_iso(timedelta(days=2)))
        later = await create_task(client, token, title="later", dueDate=_iso(timedelta(days=20)))
        await create_task(client, token, title="past", dueDate=_iso(-timedelta(days=1)))

        res = await client.get(f"{TASKS}/upcoming", headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["tasks"]] == [soon["id"]]

        res = await client.get(f"{TASKS}/upcoming", params={"days": 30}, headers=auth_header(token))
        assert [t["id"] for t in res.json()["data"]["tasks"]] == [soon["id"], later["id"]]

    async def test_upcoming_days_bounds(self, client: AsyncClient, alice):
        res = await client.get(f"{TASKS}/upcoming", params={"days": 0}, headers=auth_header(alice["token"]))
        assert res.status_code == 422

    async def test_dashboard(self, client: AsyncClient, alice):
        """대시보드: 각 구역 최대 5건."""
        token = alice["token"]
        for i in range(6):
            await create_task(client, token, title=f"late {i}", dueDate=_iso(-timedelta(days=i + 1)))
        await create_task(client, token, title="soon", dueDate=_iso(timedelta(days=1)))

        res = await client.get(f"{TASKS}/dashboard", headers=auth_header(token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["stats"]["total"] == 7
        assert data["stats"]["overdue"] == 6
        assert len(data["overdue"]) == 5
        assert data["overdue"][0]["title"] == "late 5"
        assert [t["title"] for t in data["upcoming"]] == ["soon"]
        assert len(data["recent"]) == 5


# ===== From memo =====

class TestTaskFromMemo:
    """메모로부터 업무 생성 테스트."""

    async def test_defaults_from_memo(self, client: AsyncClient, alice):
        """제목은 메모 앞 100자, 설명은 전체 내용, 동영상 연결, 메모는 업무로 표시."""
        token = alice["token"]
        video = await save_video(client, token)
        content = "x" * 150
        memo = await create_memo(client, token, content=content, videoId=video["id"])

        res = await client.post(f"{TASKS}/from-memo/{memo['id']}", headers=auth_header(token))
        assert res.status_code == 201
        task = res.json()["data"]["task"]
        assert task["title"] == "x" * 100
        assert task["description"] == content
        assert task["memo_id"] == memo["id"]
        assert task["video_id"] == video["id"]
        assert task["priority"] == "medium"

        res = await client.get(f"/api/memos/{memo['id']}", headers=auth_header(token))
        assert res.json()["data"]["memo"]["is_task"] is True

    async def test_body_overrides(self, client: AsyncClient, alice):
        token = alice["token"]
        memo = await create_memo(client, token, content="Check the bridge chords")
        res = await client.post(
            f"{TASKS}/from-memo/{memo['id']}",
            json={"title": "Practice bridge", "priority": "high", "dueDate": _iso(timedelta(days=3))},
            headers=auth_header(token),
        )
        assert res.status_code == 201
        task = res.json()["data"]["task"]
        assert task["title"] == "Practice bridge"
        assert task["description"] == "Check the bridge chords"
        assert task["priority"] == "high"
        assert task["video_id"] is None

    async def test_other_users_memo(self, client: AsyncClient, alice, bob):
        memo = await create_memo(client, alice["token"])
        res = await client.post(f"{TASKS}/from-memo/{memo['id']}", headers=auth_header(bob["token"]))
        assert res.status_code == 404

        res = await client.get(f"/api/memos/{memo['id']}", headers=auth_header(alice["token"]))
        assert res.json()["data"]["memo"]["is_task"] is False


class TestTaskOwnership:
    """다른 사용자의 업무는 존재하지 않는 것처럼 처리."""

    async def test_other_user_gets_404_everywhere(self, client: AsyncClient, alice, bob):
        task = await create_task(client, alice["token"], title="mine")
        path = f"{TASKS}/{task['id']}"
        headers = auth_header(bob["token"])

        responses = [
            await client.get(path, headers=headers),
            await client.put(path, json={"title": "stolen"}, headers=headers),
            await client.post(f"{path}/complete", headers=headers),
            await client.post(f"{path}/reopen", headers=headers),
            await client.delete(path, headers=headers),
        ]
        for res in responses:
            assert res.status_code == 404
            assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

        res = await client.get(path, headers=auth_header(alice["token"]))
        assert res.json()["data"]["task"]["title"] == "mine"
        assert res.json()["data"]["task"]["status"] == "pending"

    async def test_views_are_scoped(self, client: AsyncClient, alice, bob):
        await create_task(client, alice["token"], dueDate=_iso(-timedelta(days=1)))
        headers = auth_header(bob["token"])

        assert (await client.get(f"{TASKS}/stats", headers=headers)).json()["data"]["stats"]["total"] == 0
        assert (await client.get(f"{TASKS}/overdue", headers=headers)).json()["data"]["tasks"] == []
        assert (await client.get(TASKS, headers=headers)).json()["data"]["items"] == []

    async def test_unknown_task(self, client: AsyncClient, alice):
        res = await client.get(f"{TASKS}/{uuid.uuid4()}", headers=auth_header(alice["token"]))
        assert res.status_code == 404
        assert res.json()["error"]["message"] == "Task not found"
