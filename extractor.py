"""Best-effort field scraping over lookup payloads.

Lookup services return JSON with no stable schema, so the video link is
recovered by a prioritised list of heuristics. Each heuristic is a pure
function ``payload -> value or None``; the first truthy value wins.
"""
import json
import re
from typing import Any, Callable, Iterable, List, Optional

HD_RE = re.compile(r"1080|720|hd", re.IGNORECASE)

# Serialised payloads may carry plain or backslash-escaped slashes.
MEDIA_LINK_RE = re.compile(
    r"""https?:(?:\\*/){2}[^"']+?(?:\.mp4|\.m3u8|video|cdn[^"']+?)""",
    re.IGNORECASE,
)
HD_CANDIDATE_RE = re.compile(
    r"""https?:(?:\\*/){2}[^"']+?(?:\.mp4|m3u8|cdn[^"']+?)""",
    re.IGNORECASE,
)

VIDEO_FIELDS = ["video_url", "videoUrl", "video", "data.video", "result.video"]

PLAY_ADDRESS_FIELDS = [
    "itemInfo.itemStruct.video.playAddr",
    "item.video.playAddr",
    "data.playAddr",
    "result.playAddr",
]

ALTERNATE_FIELDS = [
    "video_url",
    "videoUrl",
    "downloadUrl",
    "download_url",
    "video",
    "data.playUrl",
    "itemInfo.itemStruct.video.playAddr",
    "item.video.playAddr",
    "cover_url",
    "result.video",
    "result.video_url",
]

THUMBNAIL_FIELDS = [
    "cover_url",
    "thumbnail",
    "thumbnail_url",
    "data.cover_url",
    "itemInfo.itemStruct.video.cover",
    "item.video.cover",
]


def _lookup_path(payload: Any, path: str) -> Any:
    current = payload
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current or None


def get_first_defined(payload: Any, paths: Iterable[str]) -> Any:
    """Return the first truthy value found at one of the dotted ``paths``.

    Every segment has to exist as a key of the current object. Empty strings,
    zero, ``False`` and empty containers count as missing, so the search moves
    on to the next path.
    """
    for path in paths:
        value = _lookup_path(payload, path)
        if value:
            return value
    return None


def _serialize(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False)


def _is_hd_variant(variant: Any) -> bool:
    if not isinstance(variant, dict):
        return False
    quality = variant.get("quality")
    return bool(quality) and bool(HD_RE.search(str(quality)))


def from_download_variants(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    variants = payload.get("download")
    if not isinstance(variants, list) or not variants:
        return None
    hd = next((v for v in variants if _is_hd_variant(v)), None)
    if hd is not None and hd.get("url"):
        return hd["url"]
    first = variants[0]
    if isinstance(first, dict):
        return first.get("url") or first
    return first or None


def from_video_fields(payload: Any) -> Any:
    return get_first_defined(payload, VIDEO_FIELDS)


def from_play_address(payload: Any) -> Any:
    return get_first_defined(payload, PLAY_ADDRESS_FIELDS)


def from_files(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    files = payload.get("files")
    if isinstance(files, dict):
        return files.get("hd") or files.get("sd") or files.get("0") or None
    if isinstance(files, list) and files:
        return files[0] or None
    return None


def from_serialized_links(payload: Any) -> Optional[str]:
    match = MEDIA_LINK_RE.search(_serialize(payload))
    if match:
        return match.group(0).replace("\\", "")
    return None


def from_alternate_fields(payload: Any) -> Any:
    return get_first_defined(payload, ALTERNATE_FIELDS)


VIDEO_HEURISTICS: List[Callable[[Any], Any]] = [
    from_download_variants,
    from_video_fields,
    from_play_address,
    from_files,
    from_serialized_links,
    from_alternate_fields,
]


def find_video_url(payload: Any) -> Any:
    for heuristic in VIDEO_HEURISTICS:
        found = heuristic(payload)
        if found:
            return found
    return None


def find_thumbnail(payload: Any) -> Any:
    return get_first_defined(payload, THUMBNAIL_FIELDS) or ""


def find_title(payload: Any, fallback: str) -> Any:
    if isinstance(payload, dict) and payload.get("title"):
        return payload["title"]
    return fallback


def looks_hd(url: Any) -> bool:
    if not isinstance(url, str):
        return False
    return bool(HD_RE.search(url))


def prefer_hd_link(video_url: Any, payload: Any) -> Any:
    """Swap a non-HD link for the first HD-looking link in the payload."""
    if looks_hd(video_url):
        return video_url
    for match in HD_CANDIDATE_RE.finditer(_serialize(payload)):
        candidate = match.group(0).replace("\\", "")
        if looks_hd(candidate):
            return candidate
    return video_url
