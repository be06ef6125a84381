from __future__ import annotations

from tasklist.app import create_app
from tasklist.config import load_settings
from tasklist.logging_setup import setup_logging

settings = load_settings()
setup_logging(settings.log_level, settings.log_file)

app = create_app(settings)
