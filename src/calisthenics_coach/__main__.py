"""Entry point for `python -m calisthenics_coach`."""

import uvicorn

from .config import settings


def main():
    uvicorn.run(
        "calisthenics_coach.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
