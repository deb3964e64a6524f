"""
Mythic Journey -- Application Entry Point.

Starts the local journey API via uvicorn.

Usage:
    python main.py              # Reload enabled when MYTHIC_DEV_MODE=1
    uvicorn main:app --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

import uvicorn

from src.api import create_app
from src.config.settings import Settings
from src.lib.logging import setup_logging

settings = Settings.from_env()
setup_logging(dev_mode=settings.dev_mode)

app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.dev_mode,
        log_level="info",
    )
