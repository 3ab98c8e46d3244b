import logging
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel

import extractor
import upstream
from config import Settings
from errors import ConverterError, ExtractionError, MissingURLError

logger = logging.getLogger("direct-link.resolver")

VIDEO_TITLE = "TikTok Video"
AUDIO_TITLE = "TikTok Audio"
MEDIA_TITLE = "TikTok Media"

DIRECT_NOTE = (
    "Direct media URL (proxying not performed). If your browser blocks CORS, "
    "consider proxying the media through your server."
)
CONVERTED_NOTE = "Converted via external converter"
NO_CONVERTER_NOTE = (
    "No MP3 converter is configured. For automatic MP3, set the CONVERTER_API "
    "environment variable to a conversion service URL, or deploy on a server "
    "with ffmpeg and enable conversion."
)
CONVERTER_FAILED_NOTE = (
    "MP3 conversion failed: {reason}. For automatic MP3, set CONVERTER_API in "
    "the environment to a conversion service (or run the server with ffmpeg)."
)


class DownloadQuery(BaseModel):
    url: Optional[str] = None
    format: Optional[str] = "mp4"

    def require_url(self) -> str:
        if not self.url:
            raise MissingURLError()
        return self.url

    def normalized_format(self) -> str:
        return (self.format or "mp4").lower()


def _degraded_mp3(payload: Any, thumbnail: Any, video_url: Any, note: str) -> Dict[str, Any]:
    return {
        "title": extractor.find_title(payload, MEDIA_TITLE),
        "thumbnail": thumbnail,
        "size": "unknown",
        "downloadUrl": video_url,
        "note": note,
    }


def _resolve_mp3(payload: Any, thumbnail: Any, video_url: Any, settings: Settings, session=None) -> Dict[str, Any]:
    if not settings.converter_api:
        logger.warning("mp3 requested but CONVERTER_API is not set; returning video link")
        return _degraded_mp3(payload, thumbnail, video_url, NO_CONVERTER_NOTE)

    try:
        converted = upstream.convert_to_mp3(video_url, settings, session=session)
    except (ConverterError, requests.RequestException) as exc:
        logger.warning("mp3 conversion failed for %s: %s", video_url, exc)
        return _degraded_mp3(
            payload, thumbnail, video_url, CONVERTER_FAILED_NOTE.format(reason=exc)
        )

    title = extractor.find_title(payload, "") or converted.get("title") or AUDIO_TITLE
    return {
        "title": title,
        "thumbnail": thumbnail,
        "size": converted.get("size") or "unknown",
        "downloadUrl": converted["downloadUrl"],
        "note": CONVERTED_NOTE,
    }


def resolve_download(query: DownloadQuery, settings: Settings, session=None) -> Dict[str, Any]:
    """Look up ``query.url`` and build the response body for the requested format.

    Raises a ``DownloadError`` subclass for every failure the caller should
    see. Converter problems never escape: an ``mp3`` request degrades to the
    unconverted video link with an explanatory ``note``.
    """
    url = query.require_url()
    fmt = query.normalized_format()

    payload = upstream.fetch_lookup(url, settings, session=session)

    video_url = extractor.find_video_url(payload)
    if not video_url:
        logger.warning("no video link found in lookup payload for %s", url)
        raise ExtractionError(payload)
    thumbnail = extractor.find_thumbnail(payload)

    if fmt == "mp3":
        return _resolve_mp3(payload, thumbnail, video_url, settings, session=session)

    if fmt == "mp4hd":
        video_url = extractor.prefer_hd_link(video_url, payload)

    return {
        "title": extractor.find_title(payload, VIDEO_TITLE),
        "thumbnail": thumbnail,
        "size": "auto",
        "downloadUrl": video_url,
        "note": DIRECT_NOTE,
    }
