from __future__ import annotations

import logging
import sys

import uvicorn

from storefront.adapters.inbound.cli import run_quote_cli
from storefront.bootstrap import build_usecases
from storefront.config import Settings

USAGE = "usage: storefront serve | storefront quote '<json>'"


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(USAGE)
        return 2

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"invalid_config: {e}")
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    command, rest = argv[0], argv[1:]
    if command == "serve":
        uvicorn.run(
            "storefront.asgi:create_asgi_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=False,
        )
        return 0

    if command == "quote" and len(rest) == 1:
        return run_quote_cli(build_usecases(settings).checkout, rest[0])

    print(USAGE)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
