"""Entry point for `python -m construct_chat`."""

import uvicorn

from .config import settings


def main():
    uvicorn.run(
        "construct_chat.app:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
