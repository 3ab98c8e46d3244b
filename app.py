import logging
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import resolver
from config import Settings
from errors import DownloadError
from resolver import DownloadQuery

logger = logging.getLogger("direct-link.api")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Lookup Direct Link API")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/api/download")
    def download(
        url: Optional[str] = Query(None, description="Social-media post URL"),
        fmt: Optional[str] = Query(None, alias="format", description="mp4 | mp4hd | mp3"),
    ):
        query = DownloadQuery(url=url, format=fmt)
        status_code = 200
        try:
            body = resolver.resolve_download(query, settings)
        except DownloadError as e:
            status_code, body = e.status_code, e.to_dict()
        except Exception as e:
            logger.exception("Error in /api/download")
            return JSONResponse(status_code=500, content={"error": str(e)})
        # lookup payloads may carry NaN/Infinity, which strict JSON rejects
        try:
            return JSONResponse(status_code=status_code, content=body)
        except ValueError as e:
            logger.exception("Could not render response for /api/download")
            return JSONResponse(status_code=500, content={"error": str(e)})

    return app


app = create_app()
