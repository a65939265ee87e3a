#!/usr/bin/env python
"""
Server Entry Point

Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py
    Gunicorn:     python run_server.py --gunicorn
"""

import argparse
import os
import subprocess

import uvicorn

APP = "seller_dashboard.main:app"


def run_dev_server(port: int) -> None:
    """Development server with auto-reload and console logs."""
    os.environ.setdefault("LOG_FORMAT", "text")
    uvicorn.run(
        APP,
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=["seller_dashboard"],
        log_level="debug",
    )


def run_prod_server(port: int) -> None:
    uvicorn.run(
        APP,
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=port,
        workers=int(os.getenv("WORKERS", 4)),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


def run_gunicorn() -> None:
    subprocess.run(["gunicorn", APP, "-c", "gunicorn.conf.py"], check=True)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seller Dashboard API Server")
    parser.add_argument("--dev", action="store_true", help="Run with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run under Gunicorn")
    parser.add_argument("--port", type=int, default=int(os.getenv("API_PORT", 8000)))
    args = parser.parse_args()

    if args.dev:
        run_dev_server(args.port)
    elif args.gunicorn:
        os.environ["BIND"] = f"0.0.0.0:{args.port}"
        run_gunicorn()
    else:
        run_prod_server(args.port)
