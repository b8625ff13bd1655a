"""Run the API with uvicorn: ``python -m happy_thoughts``."""

import sys

import uvicorn
from pydantic import ValidationError

from happy_thoughts.config import Settings


def run() -> None:
    try:
        settings = Settings()
    except ValidationError as exc:
        # DATABASE_URL and SECRET_KEY are mandatory
        print(f"Refusing to start: invalid configuration\n{exc}", file=sys.stderr)
        sys.exit(1)

    from happy_thoughts.main import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
