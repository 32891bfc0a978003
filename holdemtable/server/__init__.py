"""
holdemtable Server - FastAPI + WebSocket layer around table sessions
"""

from holdemtable.server.app import create_app

__all__ = ["create_app"]
