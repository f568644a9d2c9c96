#!/usr/bin/env python3
"""
Run the FastAPI backend

Usage:
    python3 scripts/run_api.py
    python3 scripts/run_api.py --host 0.0.0.0 --port 8080
"""
import argparse

import uvicorn

from adroi.api import app


def main():
    parser = argparse.ArgumentParser(description="Ad ROI Architect API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="auto-reload on code changes")
    args = parser.parse_args()

    if args.reload:
        uvicorn.run("adroi.api.backend:app", host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
