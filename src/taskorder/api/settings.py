from __future__ import annotations
import os

HOST = os.environ.get("TASKORDER_HOST", "127.0.0.1")
PORT = int(os.environ.get("TASKORDER_PORT", "8000"))
LOG_LEVEL = os.environ.get("TASKORDER_LOG_LEVEL", "info").lower()
API_URL = os.environ.get("TASKORDER_API_URL", f"http://{HOST}:{PORT}")
