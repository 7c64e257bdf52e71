"""Run the kiosk API with uvicorn: `python -m tizo_kiosk`."""

import uvicorn

from tizo_kiosk.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "tizo_kiosk.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep the JSON logging installed by create_app
    )


if __name__ == "__main__":
    main()
