"""Run the service with uvicorn: ``python -m calcservice``."""

import uvicorn

from calcservice.shared.config import load_config


def main() -> None:
    config = load_config()
    uvicorn.run(
        "calcservice.api.app:create_app",
        factory=True,
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
