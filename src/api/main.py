"""Uvicorn entrypoint for the marketplace access API."""

from __future__ import annotations

import uvicorn

from src.common.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("src.api.app:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()
