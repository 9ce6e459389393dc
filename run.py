#!/usr/bin/env python3
"""
Entry point script to run the CodeDocGen dashboard backend.

This script should be run from the project root directory:
    python run.py

Environment variables:
    APP_HOST: Host to bind to (default: 127.0.0.1)
    APP_PORT: Port to bind to (default: 8080)
    APP_DEBUG: Enable debug mode (default: false)
    APP_TIMEOUT: Keep-alive timeout in seconds (default: 600)
    GATEWAY_API_URL: Base URL of the analysis service (default: http://localhost:8000/api)
"""
import asyncio
import os

from hypercorn.asyncio import serve
from hypercorn.config import Config

if __name__ == "__main__":
    from codedocgen.app import configure_logging, create_app

    configure_logging()
    app = create_app()

    host = os.getenv("APP_HOST", "127.0.0.1")
    port = int(os.getenv("APP_PORT", "8080"))
    debug = os.getenv("APP_DEBUG", "false").lower() == "true"
    timeout = int(os.getenv("APP_TIMEOUT", "600"))

    # Long keep-alive so the session event stream survives slow analyses
    config = Config()
    config.bind = [f"{host}:{port}"]
    config.keep_alive_timeout = timeout
    config.shutdown_timeout = timeout
    config.graceful_timeout = 30

    if debug:
        config.loglevel = "DEBUG"
        config.accesslog = "-"
        config.errorlog = "-"

    print(f"Starting CodeDocGen dashboard on {host}:{port}")
    print(f"Keep-alive timeout: {timeout} seconds")
    print(f"Debug mode: {debug}")

    asyncio.run(serve(app, config))
