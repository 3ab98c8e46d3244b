from typing import Any, Dict


class DownloadError(Exception):
    """Failure that maps straight onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class MissingURLError(DownloadError):
    status_code = 400

    def __init__(self):
        super().__init__("Parameter 'url' is required.")


class LookupUpstreamError(DownloadError):
    status_code = 502

    def __init__(self, upstream_status: int):
        super().__init__(f"Lookup API error {upstream_status}")
        self.upstream_status = upstream_status


class ExtractionError(DownloadError):
    status_code = 500

    def __init__(self, lookup: Any):
        super().__init__(
            "Could not find a video URL in the lookup response. "
            "The lookup payload is returned for debugging."
        )
        self.lookup = lookup

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "lookup": self.lookup}


class ConverterError(Exception):
    """Converter call failed; callers degrade instead of failing the request."""
