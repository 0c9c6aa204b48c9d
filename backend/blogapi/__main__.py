"""Run the API with uvicorn: `python -m blogapi`."""

import uvicorn

from blogapi.config import settings


def main() -> None:
    uvicorn.run(
        "blogapi.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
