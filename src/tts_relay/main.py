"""CLI entrypoint for running the relay with uvicorn."""

from __future__ import annotations

import uvicorn

from .config import get_settings


def main() -> None:
    """Run the ASGI server on the configured bind address."""

    settings = get_settings()
    uvicorn.run(
        "tts_relay.app:create_app",
        factory=True,
        host=settings.relay_bind_host,
        port=settings.relay_port,
        reload=False,
    )


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
