"""동영상 API 테스트: 저장, 목록, 검색, 미리보기, 수정, 삭제, 시청 기록.

Video API tests: Saving by URL, listing and search, preview, archive
toggling, deletion (memo cascade, task unlink), watch tracking and
ownership isolation.
"""

import uuid

import httpx
from httpx import ASGITransport, AsyncClient

from tests.conftest import (
    auth_header,
    build_test_app,
    create_memo,
    create_task,
    make_settings,
    register_user,
    save_video,
)
from tests.test_youtube import API_ITEM, VIDEO_ID

VIDEOS = "/api/videos"


# ===== Save =====

class TestSaveVideo:
    """동영상 저장 테스트."""

    async def test_save_video_offline_metadata(self, client: AsyncClient, alice):
        """API 키 없이 저장: ID 기반 메타데이터."""
        res = await client.post(
            VIDEOS,
            json={"youtubeUrl": f"https://youtu.be/{VIDEO_ID}"},
            headers=auth_header(alice["token"]),
        )
        assert res.status_code == 201
        video = res.json()["data"]["video"]
        assert video["youtube_id"] == VIDEO_ID
        assert video["user_id"] == alice["user"]["id"]
        assert video["title"] == f"YouTube video {VIDEO_ID}"
        assert video["watch_count"] == 0
        assert video["is_archived"] is False
        assert video["last_watched_at"] is None

    async def test_save_same_video_returns_existing(self, client: AsyncClient, alice):
        """같은 동영상 재저장: 기존 레코드 반환, 중복 생성 없음."""
        first = await save_video(client, alice["token"])
        res = await client.post(
            VIDEOS,
            json={"youtubeUrl": f"https://www.youtube.com/embed/{VIDEO_ID}"},
            headers=auth_header(alice["token"]),
        )
        assert res.status_code == 201
        assert res.json()["data"]["video"]["id"] == first["id"]

        listed = await client.get(VIDEOS, headers=auth_header(alice["token"]))
        assert listed.json()["data"]["pagination"]["total"] == 1

    async def test_same_video_for_two_users(self, client: AsyncClient, alice, bob):
        """사용자마다 별도 레코드."""
        mine = await save_video(client, alice["token"])
        theirs = await save_video(client, bob["token"])
        assert mine["id"] != theirs["id"]
        assert mine["youtube_id"] == theirs["youtube_id"]

    async def test_invalid_url(self, client: AsyncClient, alice):
        """YouTube URL이 아니면 422 VALIDATION_ERROR."""
        res = await client.post(
            VIDEOS,
            json={"youtubeUrl": "https://vimeo.com/12345"},
            headers=auth_header(alice["token"]),
        )
        assert res.status_code == 422
        error = res.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Invalid YouTube URL"
        assert error["details"][0]["field"] == "youtubeUrl"

    async def test_missing_url_field(self, client: AsyncClient, alice):
        """필수 필드 누락 → 422, 필드명 포함."""
        res = await client.post(VIDEOS, json={}, headers=auth_header(alice["token"]))
        assert res.status_code == 422
        assert res.json()["error"]["details"][0]["field"] == "youtubeUrl"

    async def test_requires_authentication(self, client: AsyncClient):
        res = await client.post(VIDEOS, json={"youtubeUrl": f"https://youtu.be/{VIDEO_ID}"})
        assert res.status_code == 401
        assert res.json()["error"]["code"] == "AUTHENTICATION_FAILED"


class TestSaveWithYouTubeApi:
    """YouTube API 메타데이터로 저장 테스트 (MockTransport)."""

    async def _client_for(self, handler) -> tuple:
        application = await build_test_app(
            make_settings(YOUTUBE_API_KEY="test-key"),
            youtube_transport=httpx.MockTransport(handler),
        )
        client = AsyncClient(transport=ASGITransport(app=application), base_url="http://test")
        return application, client

    async def test_save_with_api_metadata(self):
        """API 메타데이터 저장: 조회수/좋아요/태그는 metadata에."""
        application, client = await self._client_for(
            lambda request: httpx.Response(200, json={"items": [API_ITEM]})
        )
        async with client:
            user = await register_user(client, "carol")
            video = await save_video(client, user["token"], VIDEO_ID)
        await application.state.context.dispose()

        assert video["title"] == "Never Gonna Give You Up"
        assert video["channel_name"] == "Rick Astley"
        assert video["duration"] == 213
        assert video["metadata"]["view_count"] == 1500000000
        assert video["metadata"]["like_count"] == 17000000
        assert video["metadata"]["tags"] == ["rick", "astley"]

    async def test_video_missing_on_youtube(self):
        """YouTube에 없는 동영상 → 404, 저장되지 않음."""
        application, client = await self._client_for(
            lambda request: httpx.Response(200, json={"items": []})
        )
        async with client:
            user = await register_user(client, "carol")
            res = await client.post(
                VIDEOS,
                json={"youtubeUrl": f"https://youtu.be/{VIDEO_ID}"},
                headers=auth_header(user["token"]),
            )
            listed = await client.get(VIDEOS, headers=auth_header(user["token"]))
        await application.state.context.dispose()

        assert res.status_code == 404
        assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
        assert listed.json()["data"]["pagination"]["total"] == 0


# ===== Preview =====

class TestPreview:
    """저장 없는 미리보기 테스트."""

    async def test_preview(self, client: AsyncClient, alice):
        url = f"https://www.youtube.com/watch?v={VIDEO_ID}"
        res = await client.get(f"{VIDEOS}/preview", params={"url": url}, headers=auth_header(alice["token"]))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["video_metadata"]["youtube_id"] == VIDEO_ID
        assert data["youtube_url"] == url

        listed = await client.get(VIDEOS, headers=auth_header(alice["token"]))
        assert listed.json()["data"]["pagination"]["total"] == 0

    async def test_preview_invalid_url(self, client: AsyncClient, alice):
        res = await client.get(
            f"{VIDEOS}/preview", params={"url": "nope"}, headers=auth_header(alice["token"])
        )
        assert res.status_code == 422
        assert res.json()["error"]["details"][0]["field"] == "url"


# ===== List / Search =====

class TestListVideos:
    """동영상 목록/검색 테스트."""

    async def test_list_with_pagination(self, client: AsyncClient, alice):
        """페이지네이션 메타데이터 (camelCase)."""
        for youtube_id in ("aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"):
            await save_video(client, alice["token"], youtube_id)

        res = await client.get(VIDEOS, params={"limit": 2}, headers=auth_header(alice["token"]))
        assert res.status_code == 200
        data = res.json()["data"]
        assert len(data["items"]) == 2
        assert data["pagination"] == {
            "page": 1,
            "limit": 2,
            "total": 3,
            "totalPages": 2,
            "hasNext": True,
            "hasPrev": False,
        }

    async def test_sort_by_title(self, client: AsyncClient, alice):
        for youtube_id in ("bbbbbbbbbbb", "aaaaaaaaaaa", "ccccccccccc"):
            await save_video(client, alice["token"], youtube_id)

        res = await client.get(
            VIDEOS, params={"sort": "title", "order": "asc"}, headers=auth_header(alice["token"])
        )
        ids = [v["youtube_id"] for v in res.json()["data"]["items"]]
        assert ids == ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"]

    async def test_invalid_sort_rejected(self, client: AsyncClient, alice):
        """허용 목록 밖 정렬 필드 → 422."""
        res = await client.get(
            VIDEOS, params={"sort": "password_hash"}, headers=auth_header(alice["token"])
        )
        assert res.status_code == 422
        error = res.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "sort"

    async def test_archived_filter(self, client: AsyncClient, alice):
        kept = await save_video(client, alice["token"], "aaaaaaaaaaa")
        archived = await save_video(client, alice["token"], "bbbbbbbbbbb")
        await client.put(
            f"{VIDEOS}/{archived['id']}", json={"isArchived": True}, headers=auth_header(alice["token"])
        )

        res = await client.get(VIDEOS, params={"archived": "true"}, headers=auth_header(alice["token"]))
        assert [v["id"] for v in res.json()["data"]["items"]] == [archived["id"]]

        res = await client.get(VIDEOS, params={"archived": "false"}, headers=auth_header(alice["token"]))
        assert [v["id"] for v in res.json()["data"]["items"]] == [kept["id"]]

    async def test_search(self, client: AsyncClient, alice):
        """제목 부분 일치 검색 (대소문자 무시)."""
        await save_video(client, alice["token"], "aaaaaaaaaaa")
        await save_video(client, alice["token"], "bbbbbbbbbbb")

        res = await client.get(
            f"{VIDEOS}/search", params={"q": "AAAA"}, headers=auth_header(alice["token"])
        )
        items = res.json()["data"]["items"]
        assert [v["youtube_id"] for v in items] == ["aaaaaaaaaaa"]

    async def test_search_requires_query(self, client: AsyncClient, alice):
        res = await client.get(f"{VIDEOS}/search", headers=auth_header(alice["token"]))
        assert res.status_code == 422

    async def test_list_only_own_videos(self, client: AsyncClient, alice, bob):
        await save_video(client, alice["token"], "aaaaaaaaaaa")
        await save_video(client, bob["token"], "bbbbbbbbbbb")

        res = await client.get(VIDEOS, headers=auth_header(bob["token"]))
        items = res.json()["data"]["items"]
        assert [v["youtube_id"] for v in items] == ["bbbbbbbbbbb"]


# ===== Detail / Update / Delete / Watch =====

class TestVideoDetail:
    """동영상 상세/수정/삭제/시청 테스트."""

    async def test_get_video(self, client: AsyncClient, alice):
        video = await save_video(client, alice["token"])
        res = await client.get(f"{VIDEOS}/{video['id']}", headers=auth_header(alice["token"]))
        assert res.status_code == 200
        assert res.json()["data"]["video"]["id"] == video["id"]

    async def test_get_unknown_video(self, client: AsyncClient, alice):
        res = await client.get(f"{VIDEOS}/{uuid.uuid4()}", headers=auth_header(alice["token"]))
        assert res.status_code == 404
        assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    async def test_malformed_id(self, client: AsyncClient, alice):
        """UUID 형식이 아닌 ID → 422."""
        res = await client.get(f"{VIDEOS}/not-a-uuid", headers=auth_header(alice["token"]))
        assert res.status_code == 422

    async def test_archive_and_unarchive(self, client: AsyncClient, alice):
        video = await save_video(client, alice["token"])
        res = await client.put(
            f"{VIDEOS}/{video['id']}", json={"isArchived": True}, headers=auth_header(alice["token"])
        )
        assert res.status_code == 200
        assert res.json()["data"]["video"]["is_archived"] is True

        res = await client.put(
            f"{VIDEOS}/{video['id']}", json={"isArchived": False}, headers=auth_header(alice["token"])
        )
        assert res.json()["data"]["video"]["is_archived"] is False

    async def test_empty_update_is_noop(self, client: AsyncClient, alice):
        video = await save_video(client, alice["token"])
        res = await client.put(f"{VIDEOS}/{video['id']}", json={}, headers=auth_header(alice["token"]))
        assert res.status_code == 200
        assert res.json()["data"]["video"]["is_archived"] is False

    async def test_mark_watched_increments(self, client: AsyncClient, alice):
        """시청 기록: watch_count 증가, last_watched_at 설정."""
        video = await save_video(client, alice["token"])
        for expected in (1, 2):
            res = await client.post(
                f"{VIDEOS}/{video['id']}/watch", headers=auth_header(alice["token"])
            )
            assert res.status_code == 200
            watched = res.json()["data"]["video"]
            assert watched["watch_count"] == expected
            assert watched["last_watched_at"] is not None

    async def test_delete_cascades_memos_and_unlinks_tasks(self, client: AsyncClient, alice):
        """삭제 시 메모는 함께 삭제, 업무는 연결만 해제."""
        token = alice["token"]
        video = await save_video(client, token)
        memo = await create_memo(client, token, videoId=video["id"], timestampSeconds=30)
        task = await create_task(client, token, videoId=video["id"])

        res = await client.delete(f"{VIDEOS}/{video['id']}", headers=auth_header(token))
        assert res.status_code == 200
        assert res.json()["data"]["message"] == "Video deleted successfully"

        assert (await client.get(f"{VIDEOS}/{video['id']}", headers=auth_header(token))).status_code == 404
        assert (await client.get(f"/api/memos/{memo['id']}", headers=auth_header(token))).status_code == 404
        res = await client.get(f"/api/tasks/{task['id']}", headers=auth_header(token))
        assert res.status_code == 200
        assert res.json()["data"]["task"]["video_id"] is None

    async def test_delete_twice(self, client: AsyncClient, alice):
        video = await save_video(client, alice["token"])
        await client.delete(f"{VIDEOS}/{video['id']}", headers=auth_header(alice["token"]))
        res = await client.delete(f"{VIDEOS}/{video['id']}", headers=auth_header(alice["token"]))
        assert res.status_code == 404


class TestVideoOwnership:
    """다른 사용자의 동영상은 존재하지 않는 것처럼 처리."""

    async def test_other_user_gets_404_everywhere(self, client: AsyncClient, alice, bob):
        video = await save_video(client, alice["token"])
        path = f"{VIDEOS}/{video['id']}"
        headers = auth_header(bob["token"])

        responses = [
            await client.get(path, headers=headers),
            await client.put(path, json={"isArchived": True}, headers=headers),
            await client.post(f"{path}/watch", headers=headers),
            await client.delete(path, headers=headers),
        ]
        for res in responses:
            assert res.status_code == 404
            assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
            assert res.json()["error"]["message"] == "Video not found"

        res = await client.get(path, headers=auth_header(alice["token"]))
        video_now = res.json()["data"]["video"]
        assert video_now["is_archived"] is False
        assert video_now["watch_count"] == 0
