"""
Stock Website Backend — Uvicorn Launcher
Run this file to start the development server.

Usage:
    python run.py
    python run.py --port 5000
    python run.py --reload
"""
import argparse

import uvicorn

from formpay.config import get_settings
from formpay.logging_config import configure_logging, get_logger


def main():
    parser = argparse.ArgumentParser(description="Stock Website Backend Server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=5000, help="Bind port (default: 5000)")
    parser.add_argument("--reload", action="store_true", help="Enable hot reload for development")
    parser.add_argument("--workers", type=int, default=1, help="Number of workers (default: 1)")

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    get_logger("server").info(
        "server_starting",
        api=f"http://{args.host}:{args.port}",
        test=f"http://localhost:{args.port}/test",
        docs=f"http://localhost:{args.port}/docs",
        reload=args.reload,
        workers=args.workers,
    )

    uvicorn.run(
        "formpay.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
        log_level="info",
    )


if __name__ == "__main__":
    main()
