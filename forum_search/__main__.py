"""Run the API server: ``python -m forum_search``."""

import uvicorn

from forum_search.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "forum_search.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
