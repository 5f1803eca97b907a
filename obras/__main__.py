"""`python -m obras` / `obras-api`: levanta uvicorn con HOST/PORT de Settings."""

import uvicorn

from .crosscutting.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "obras.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
