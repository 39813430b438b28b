"""YouTube 메타데이터 서비스: YouTube Data API v3 조회.

YouTube metadata service backed by the YouTube Data API v3.
API 키가 없거나 API에 접근할 수 없으면 ID로부터 결정적인 오프라인
메타데이터를 반환합니다. (Without an API key, or when the API is
unreachable, a deterministic offline record derived from the id is returned.)
"""

import logging
from datetime import datetime
from typing import Any

import httpx

from memotube.config import Settings
from memotube.schemas.video import VideoMetadata
from memotube.utils.exceptions import NotFoundError
from memotube.utils.youtube import parse_duration, thumbnail_url

logger = logging.getLogger(__name__)


class YouTubeService:
    """YouTube 메타데이터 제공자.

    Video metadata provider. ``transport`` lets tests plug in an
    ``httpx.MockTransport``.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings: Settings = settings
        self._transport: httpx.AsyncBaseTransport | None = transport

    @property
    def is_offline(self) -> bool:
        return not self.settings.YOUTUBE_API_KEY

    def offline_metadata(self, youtube_id: str) -> VideoMetadata:
        """API 없이 ID만으로 만든 메타데이터 (Metadata built from the id alone)."""
        return VideoMetadata(
            youtube_id=youtube_id,
            title=f"YouTube video {youtube_id}",
            description="",
            thumbnail_url=thumbnail_url(youtube_id),
            duration=0,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.YOUTUBE_API_BASE_URL,
            timeout=self.settings.YOUTUBE_API_TIMEOUT,
            transport=self._transport,
        )

    async def get_video_metadata(self, youtube_id: str) -> VideoMetadata:
        """동영상 메타데이터를 조회합니다.

        Fetch metadata for a video id.

        Args:
            youtube_id: YouTube 동영상 ID (11-char id)

        Returns:
            VideoMetadata: 메타데이터 (API 불가 시 오프라인 값)
                           (Metadata; offline record when the API is unavailable)

        Raises:
            NotFoundError: 동영상이 없거나 비공개일 때 (Video missing or private)
        """
        if self.is_offline:
            return self.offline_metadata(youtube_id)

        try:
            async with self._client() as client:
                response = await client.get(
                    "/videos",
                    params={
                        "key": self.settings.YOUTUBE_API_KEY,
                        "id": youtube_id,
                        "part": "snippet,contentDetails,statistics",
                    },
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise NotFoundError("Video not found or is private") from exc
            logger.warning(
                "YouTube API returned %s for %s; using offline metadata",
                exc.response.status_code,
                youtube_id,
            )
            return self.offline_metadata(youtube_id)
        except httpx.RequestError as exc:
            logger.warning("YouTube API unreachable for %s (%s); using offline metadata", youtube_id, exc)
            return self.offline_metadata(youtube_id)

        items: list[dict[str, Any]] = response.json().get("items") or []
        if not items:
            raise NotFoundError("Video not found or is private")
        return self._parse_item(items[0])

    def _parse_item(self, item: dict[str, Any]) -> VideoMetadata:
        """API 응답 항목을 VideoMetadata로 변환합니다."""
        snippet: dict[str, Any] = item.get("snippet", {})
        details: dict[str, Any] = item.get("contentDetails", {})
        statistics: dict[str, Any] = item.get("statistics", {})
        thumbnails: dict[str, Any] = snippet.get("thumbnails", {})

        # 고화질 → 중간 → 기본 순서로 썸네일 선택 (best available thumbnail)
        best_thumbnail: str | None = None
        for size in ("maxres", "high", "medium", "default"):
            if thumbnails.get(size, {}).get("url"):
                best_thumbnail = thumbnails[size]["url"]
                break

        published_raw: str | None = snippet.get("publishedAt")
        published_at: datetime | None = None
        if published_raw:
            published_at = datetime.fromisoformat(published_raw.replace("Z", "+00:00"))

        like_count_raw = statistics.get("likeCount")
        return VideoMetadata(
            youtube_id=item["id"],
            title=snippet.get("title") or f"YouTube video {item['id']}",
            description=snippet.get("description") or "",
            channel_id=snippet.get("channelId"),
            channel_name=snippet.get("channelTitle"),
            thumbnail_url=best_thumbnail or thumbnail_url(item["id"]),
            duration=parse_duration(details.get("duration")),
            published_at=published_at,
            view_count=int(statistics.get("viewCount") or 0),
            like_count=int(like_count_raw) if like_count_raw is not None else None,
            tags=snippet.get("tags") or [],
        )
