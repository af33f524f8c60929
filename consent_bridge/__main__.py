"""Run the service with uvicorn: ``python -m consent_bridge``."""

import uvicorn

from consent_bridge.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "consent_bridge.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
