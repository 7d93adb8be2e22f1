"""ShortsBot API server entry point"""

import uvicorn

from shortsbot.app import create_app
from shortsbot.core.config import get_settings

app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
