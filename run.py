#!/usr/bin/env python3
"""
holdemtable - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--log-level LEVEL]

Table timing and the chip bank URL come from HOLDEM_* environment variables
(see holdemtable/config.py).
"""

import argparse
import os
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="holdemtable Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", default=None, help="Override HOLDEM_LOG_LEVEL")
    args = parser.parse_args()

    if args.log_level:
        os.environ["HOLDEM_LOG_LEVEL"] = args.log_level

    uvicorn.run(
        "holdemtable.server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
