import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

import resolver
from config import Settings
from errors import DownloadError
from resolver import DownloadQuery

logger = logging.getLogger("direct-link.wsgi")


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    if settings.allow_origins == ["*"]:
        CORS(app, resources={r"/*": {"origins": "*"}})
    else:
        CORS(app, resources={r"/*": {"origins": settings.allow_origins}})

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"ok": True})

    @app.route("/api/download", methods=["GET"])
    def download():
        query = DownloadQuery(
            url=request.args.get("url"),
            format=request.args.get("format"),
        )
        try:
            return jsonify(resolver.resolve_download(query, settings))
        except DownloadError as e:
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            logger.exception("Error in /api/download")
            return jsonify({"error": str(e)}), 500

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
