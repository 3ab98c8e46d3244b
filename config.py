import os
from typing import List, Optional

from pydantic import BaseModel

DEFAULT_LOOKUP_API = "https://api.tikmate.app/api/lookup"


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


class Settings(BaseModel):
    """Deployment configuration, resolved once when an app is created."""

    lookup_api: str = DEFAULT_LOOKUP_API
    lookup_timeout: float = 20.0
    # unset disables mp3 conversion
    converter_api: Optional[str] = None
    converter_timeout: float = 120.0
    allow_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            lookup_api=os.getenv("LOOKUP_API") or DEFAULT_LOOKUP_API,
            lookup_timeout=float(os.getenv("LOOKUP_TIMEOUT", "20")),
            converter_api=(os.getenv("CONVERTER_API") or "").strip() or None,
            converter_timeout=float(os.getenv("CONVERTER_TIMEOUT", "120")),
            allow_origins=_split_origins(os.getenv("ALLOW_ORIGINS", "*")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
