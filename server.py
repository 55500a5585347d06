#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Users API (FastAPI + SQLite)

Runs the HTTP server on a fixed local address. The database is chosen by the
DATABASE_URL environment variable (or `database_url` in config.yaml) and
defaults to sqlite:///users.db.
"""

import logging

import uvicorn

from backend import settings
from backend.logs import configure_logging


def main():
    configure_logging()
    logging.getLogger(__name__).info(f"Server on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run("backend.api:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
