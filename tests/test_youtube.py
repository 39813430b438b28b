"""YouTube URL 파싱 및 메타데이터 서비스 테스트.

YouTube URL/duration parsing and the metadata provider, with the Data API
replaced by ``httpx.MockTransport``.
"""

import httpx
import pytest

from memotube.services.youtube_service import YouTubeService
from memotube.utils.exceptions import NotFoundError
from memotube.utils.youtube import extract_video_id, parse_duration, thumbnail_url
from tests.conftest import make_settings

VIDEO_ID = "dQw4w9WgXcQ"

API_ITEM = {
    "id": VIDEO_ID,
    "snippet": {
        "title": "Never Gonna Give You Up",
        "description": "Official video",
        "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw",
        "channelTitle": "Rick Astley",
        "publishedAt": "2009-10-25T06:57:33Z",
        "tags": ["rick", "astley"],
        "thumbnails": {
            "default": {"url": "https://i.ytimg.com/vi/x/default.jpg"},
            "high": {"url": "https://i.ytimg.com/vi/x/hqdefault.jpg"},
        },
    },
    "contentDetails": {"duration": "PT3M33S"},
    "statistics": {"viewCount": "1500000000", "likeCount": "17000000"},
}


def _service(handler) -> YouTubeService:
    settings = make_settings(YOUTUBE_API_KEY="test-key")
    return YouTubeService(settings, transport=httpx.MockTransport(handler))


class TestExtractVideoId:
    """URL에서 동영상 ID 추출 테스트."""

    @pytest.mark.parametrize(
        "url",
        [
            f"https://www.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtube.com/watch?v={VIDEO_ID}&t=42s",
            f"https://www.youtube.com/watch?feature=share&v={VIDEO_ID}",
            f"https://m.youtube.com/watch?v={VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}",
            f"https://youtu.be/{VIDEO_ID}?t=10",
            f"https://www.youtube.com/embed/{VIDEO_ID}",
            f"https://www.youtube.com/shorts/{VIDEO_ID}",
            f"youtube.com/watch?v={VIDEO_ID}",
        ],
    )
    def test_supported_urls(self, url):
        assert extract_video_id(url) == VIDEO_ID

    @pytest.mark.parametrize(
        "url",
        [
            "",
            None,
            "https://example.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/watch?v=short",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQextra",
            "not a url",
        ],
    )
    def test_rejected_urls(self, url):
        assert extract_video_id(url) is None


class TestParseDuration:
    """ISO 8601 재생 시간 파싱 테스트."""

    @pytest.mark.parametrize(
        ("value", "seconds"),
        [
            ("PT1H2M3S", 3723),
            ("PT3M33S", 213),
            ("PT45S", 45),
            ("PT2H", 7200),
            ("P1DT1S", 86401),
            ("PT0S", 0),
            ("", 0),
            (None, 0),
            ("garbage", 0),
            ("PT", 0),
        ],
    )
    def test_parse(self, value, seconds):
        assert parse_duration(value) == seconds


class TestYouTubeService:
    """메타데이터 제공자 테스트."""

    async def test_offline_without_api_key(self):
        """API 키가 없으면 네트워크 없이 오프라인 메타데이터."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("network must not be used")

        service = YouTubeService(make_settings(YOUTUBE_API_KEY=""), transport=httpx.MockTransport(handler))
        metadata = await service.get_video_metadata(VIDEO_ID)
        assert metadata.youtube_id == VIDEO_ID
        assert metadata.title == f"YouTube video {VIDEO_ID}"
        assert metadata.thumbnail_url == thumbnail_url(VIDEO_ID)
        assert metadata.duration == 0

    async def test_fetch_metadata(self):
        """API 응답을 메타데이터로 변환."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json={"items": [API_ITEM]})

        metadata = await _service(handler).get_video_metadata(VIDEO_ID)
        assert seen["id"] == VIDEO_ID
        assert seen["key"] == "test-key"
        assert metadata.title == "Never Gonna Give You Up"
        assert metadata.channel_name == "Rick Astley"
        assert metadata.duration == 213
        assert metadata.view_count == 1500000000
        assert metadata.like_count == 17000000
        assert metadata.tags == ["rick", "astley"]
        assert metadata.thumbnail_url == "https://i.ytimg.com/vi/x/hqdefault.jpg"
        assert metadata.published_at.year == 2009

    async def test_empty_items_not_found(self):
        """items가 비어 있으면 404."""
        service = _service(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(NotFoundError):
            await service.get_video_metadata(VIDEO_ID)

    async def test_api_404_not_found(self):
        service = _service(lambda request: httpx.Response(404, json={}))
        with pytest.raises(NotFoundError):
            await service.get_video_metadata(VIDEO_ID)

    @pytest.mark.parametrize("status_code", [403, 500, 503])
    async def test_api_errors_fall_back_offline(self, status_code):
        """403/5xx 응답은 오프라인 메타데이터로 대체."""
        service = _service(lambda request: httpx.Response(status_code, json={}))
        metadata = await service.get_video_metadata(VIDEO_ID)
        assert metadata.title == f"YouTube video {VIDEO_ID}"

    async def test_network_error_falls_back_offline(self):
        """네트워크 오류도 오프라인 메타데이터로 대체."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        metadata = await _service(handler).get_video_metadata(VIDEO_ID)
        assert metadata.youtube_id == VIDEO_ID
        assert metadata.duration == 0
