#!/usr/bin/env python3
"""
Run script for the ArkiArt auth API.
Launches the FastAPI server on HOST:PORT (default 0.0.0.0:8080).
"""
import uvicorn
import sys
import traceback

from arkiart import config

if __name__ == "__main__":
    port = config.get_port()
    try:
        print("Starting ArkiArt auth API server...")
        print(f"Server running on http://localhost:{port}")

        uvicorn.run(
            "arkiart.main:app",
            host=config.get_host(),
            port=port,
            log_level=config.LOG_LEVEL.lower()
        )
    except Exception as e:
        print(f"Error starting server: {e}")
        traceback.print_exc()
        sys.exit(1)
