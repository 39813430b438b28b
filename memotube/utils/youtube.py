"""YouTube URL/길이 파싱 유틸리티 모듈.

YouTube URL and duration parsing utilities.
"""

import re

# 지원 URL 형식: watch, youtu.be, embed, shorts (11자 ID)
_VIDEO_ID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"^(?:https?://)?youtu\.be/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"^(?:https?://)?(?:www\.|m\.)?youtube\.com/embed/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"^(?:https?://)?(?:www\.|m\.)?youtube\.com/shorts/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
)

# ISO 8601 재생 시간: PT1H23M45S, P1DT2H 등 (ISO 8601 duration)
_DURATION_PATTERN: re.Pattern[str] = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$"
)


def extract_video_id(url: str | None) -> str | None:
    """YouTube URL에서 11자 동영상 ID를 추출합니다.

    Extract the 11-character video id from a YouTube URL.

    Args:
        url: YouTube URL (watch, youtu.be, embed, shorts)

    Returns:
        str | None: 동영상 ID, 인식할 수 없으면 None (Video id, or None)

    Example:
        extract_video_id("https://youtu.be/dQw4w9WgXcQ")  # "dQw4w9WgXcQ"
    """
    if not url:
        return None
    candidate: str = url.strip()
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.match(candidate)
        if match:
            return match.group(1)
    return None


def parse_duration(duration: str | None) -> int:
    """ISO 8601 재생 시간을 초 단위로 변환합니다.

    Convert an ISO 8601 duration (``PT1H2M3S``) to seconds.
    Unparseable input yields 0.
    """
    if not duration:
        return 0
    match = _DURATION_PATTERN.match(duration)
    if match is None or duration in ("P", "PT") or duration.endswith("T"):
        return 0
    days, hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def thumbnail_url(youtube_id: str) -> str:
    """기본 고화질 썸네일 URL (Default high-quality thumbnail URL)."""
    return f"https://i.ytimg.com/vi/{youtube_id}/hqdefault.jpg"
