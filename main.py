"""
CV Scanner Service — Main Entry Point
=====================================
Starts the Flask-based scanning microservice.

Usage:
    python main.py                    # Default: 0.0.0.0:7005
    python main.py --port 8000        # Custom port
    python main.py --debug            # Debug mode
    APP_ENV=production python main.py # HTTPS via SSL_PRIVATE_KEY, SSL_CERTIFICATE
"""

import argparse
import logging

from cvscan.server import build_ssl_context, create_app

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="CV Scanner Service")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=7005, help="Bind port")
    parser.add_argument("--debug", action="store_true", help="Debug mode")
    args = parser.parse_args()

    app = create_app()
    ssl_context = build_ssl_context()
    scheme = "https" if ssl_context else "http"
    logger.info(f"Upload directory: {app.config['UPLOAD_DIR']}")
    logger.info(f"Starting server on {scheme}://{args.host}:{args.port}")
    app.run(
        host=args.host,
        port=args.port,
        debug=args.debug,
        ssl_context=ssl_context,
    )


if __name__ == "__main__":
    main()
