"""
HTTP Microservice
=================
Flask-based HTTP API for the résumé scanner.

Endpoints:
    GET    /                    → Landing page with the upload contract
    POST   /scan/resume         → Scan an uploaded PDF (form-data key: cv)
    GET    /uploads/<filename>  → Serve a previously uploaded PDF
    GET    /api/health          → Health check
"""

from __future__ import annotations

import logging
import os
import ssl
import time
from pathlib import Path
from typing import Optional

from flask import (
    Blueprint,
    Flask,
    current_app,
    jsonify,
    request,
    send_from_directory,
)
from flask_cors import CORS
from werkzeug.utils import secure_filename

from . import __version__
from .engine import ScannerConfig, ScanEngine

logger = logging.getLogger(__name__)

UPLOAD_FIELD = "cv"
ENGINE_KEY = "cvscan_engine"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB

LANDING_PAGE = """
<div style="text-align:center;margin-top:80px;font-family:Arial;">
  <h1 style="color:green;">CV SCANNER</h1>
  <h2>POST → <code>/scan/resume</code></h2>
  <p><strong>Key:</strong> cv | <strong>Type:</strong> File | <strong>Accept:</strong> .pdf</p>
  <h3 style="color:red;">90+ ONLY WITH THE OFFICIAL TEMPLATE</h3>
</div>
"""

bp = Blueprint("cvscan", __name__)


def create_app(config: Optional[dict] = None) -> Flask:
    """Create and configure the Flask app."""
    app = Flask(__name__)
    CORS(app)

    project_root = Path(__file__).parent.parent.absolute()

    app.config.setdefault("UPLOAD_DIR", str(project_root / "uploads"))
    app.config.setdefault("APP_URL", os.getenv("APP_URL", ""))
    # Flask ships MAX_CONTENT_LENGTH=None, so setdefault would keep it unbounded
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES
    app.config.setdefault("LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO"))
    if config:
        app.config.update(config)

    Path(app.config["UPLOAD_DIR"]).mkdir(parents=True, exist_ok=True)

    app.extensions[ENGINE_KEY] = ScanEngine(
        ScannerConfig(log_level=app.config["LOG_LEVEL"])
    )
    app.register_blueprint(bp)

    return app


# ─── Landing ──────────────────────────────────────────────────────────────────


@bp.route("/")
def landing():
    return LANDING_PAGE


# ─── Health Check ─────────────────────────────────────────────────────────────


@bp.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "cvscan",
        "version": __version__,
    })


# ─── Scan Endpoint ────────────────────────────────────────────────────────────


@bp.route("/scan/resume", methods=["POST"])
def scan_resume():
    """
    Scan an uploaded PDF résumé.

    Accepts a multipart/form-data upload under the `cv` key and returns the
    scan result plus a URL to the stored upload.
    """
    file = request.files.get(UPLOAD_FIELD)
    if file is None or not file.filename:
        return jsonify({"error": "Upload file with key: cv"}), 400

    original_name = secure_filename(file.filename) or "resume.pdf"
    if not original_name.lower().endswith(".pdf"):
        return jsonify({"error": "Only PDF files are accepted"}), 400

    filename = f"{int(time.time() * 1000)}_{original_name}"
    upload_path = Path(current_app.config["UPLOAD_DIR"]) / filename
    file.save(str(upload_path))
    logger.info(f"Stored upload: {upload_path}")

    engine: ScanEngine = current_app.extensions[ENGINE_KEY]
    result = engine.scan(upload_path)

    base_url = current_app.config["APP_URL"] or request.host_url
    payload = result.model_dump(by_alias=True)
    payload["pdfUrl"] = f"{base_url.rstrip('/')}/uploads/{filename}"

    return jsonify(payload), 200


@bp.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename: str):
    """Serve a stored upload."""
    return send_from_directory(current_app.config["UPLOAD_DIR"], filename)


# ─── Server Entry Point ───────────────────────────────────────────────────────


def build_ssl_context(env: Optional[dict] = None) -> Optional[ssl.SSLContext]:
    """
    Build the TLS context used in production.

    Production mode is APP_ENV=production. The key and certificate come from
    SSL_PRIVATE_KEY and SSL_CERTIFICATE; SSL_CA_BUNDLE is optional.

    Returns:
        An SSLContext, or None to serve plain HTTP (not in production, or
        the credentials could not be loaded).
    """
    env = os.environ if env is None else env
    if env.get("APP_ENV") != "production":
        return None

    try:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(env["SSL_CERTIFICATE"], env["SSL_PRIVATE_KEY"])
        if env.get("SSL_CA_BUNDLE"):
            context.load_verify_locations(env["SSL_CA_BUNDLE"])
    except (KeyError, OSError, ssl.SSLError) as e:
        logger.error(f"Error starting HTTPS server: {e}")
        logger.warning("Falling back to HTTP")
        return None

    return context


def run_server(host: str = "0.0.0.0", port: int = 7005, debug: bool = False):
    """Run the server, over HTTPS when production TLS credentials load."""
    app = create_app()
    ssl_context = build_ssl_context()
    scheme = "https" if ssl_context else "http"
    logger.info(f"Serving on {scheme}://{host}:{port}")
    logger.info(f"Upload CV → POST /scan/resume (form-data, key: {UPLOAD_FIELD})")
    app.run(host=host, port=port, debug=debug, ssl_context=ssl_context)
