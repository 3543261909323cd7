"""Run the API server: ``python -m capital``."""

import uvicorn

from capital.config import settings


def main() -> None:
    uvicorn.run("capital.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
