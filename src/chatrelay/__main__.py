"""Run the relay with uvicorn: ``python -m chatrelay``."""

import uvicorn

from chatrelay.configs.config import get_app_config


def main() -> None:
    config = get_app_config()
    uvicorn.run(
        "chatrelay.app:app",
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
