import logging
from typing import Any, Dict

import requests

from config import Settings
from errors import ConverterError, LookupUpstreamError

logger = logging.getLogger("direct-link.upstream")


def fetch_lookup(url: str, settings: Settings, session=None) -> Any:
    """Resolve ``url`` through the lookup service and return its raw JSON.

    Network failures and undecodable bodies propagate unchanged. A single
    attempt is made.
    """
    http = session or requests
    logger.info("lookup request for %s", url)
    resp = http.get(
        settings.lookup_api,
        params={"url": url},
        timeout=settings.lookup_timeout,
    )
    if not resp.ok:
        logger.warning("lookup service answered %s for %s", resp.status_code, url)
        raise LookupUpstreamError(resp.status_code)
    return resp.json()


def convert_to_mp3(video_url: str, settings: Settings, session=None) -> Dict[str, Any]:
    http = session or requests
    logger.info("forwarding %s to converter", video_url)
    resp = http.post(
        settings.converter_api,
        json={"url": video_url},
        timeout=settings.converter_timeout,
    )
    if not resp.ok:
        raise ConverterError(f"Converter service returned {resp.status_code}")
    try:
        body = resp.json()
    except ValueError as exc:
        raise ConverterError(f"Converter returned invalid JSON: {exc}") from exc
    if not isinstance(body, dict) or not body.get("downloadUrl"):
        raise ConverterError("Converter did not return a downloadUrl")
    return body
