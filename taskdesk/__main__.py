"""Run the local API server: ``python -m taskdesk``."""

import uvicorn

from taskdesk.core.settings import get_settings
from taskdesk.main import create_application


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_application(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
