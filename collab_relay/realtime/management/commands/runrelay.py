from __future__ import annotations

import uvicorn
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

ASGI_APPLICATION = "config.asgi:application"


class Command(BaseCommand):
    help = "Serve the Socket.IO relay and the HTTP API with uvicorn"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--host",
            dest="host",
            default=settings.RELAY_HOST,
            help="Interface to bind (default: RELAY_HOST)",
        )
        parser.add_argument(
            "--port",
            dest="port",
            type=int,
            default=settings.RELAY_PORT,
            help="Port to bind (default: RELAY_PORT, env PORT)",
        )
        parser.add_argument(
            "--log-level",
            dest="log_level",
            choices=["critical", "error", "warning", "info", "debug"],
            default="info",
        )

    def handle(self, *args, **options) -> str | None:
        host: str = options["host"]
        port: int = options["port"]

        config = uvicorn.Config(
            ASGI_APPLICATION,
            host=host,
            port=port,
            log_level=options["log_level"],
            lifespan="off",
        )
        server = uvicorn.Server(config)
        self.stdout.write(f"Starting relay on {host}:{port}")

        # uvicorn exits on bind failure; anything else that stops it before
        # startup completes is reported the same way.
        try:
            server.run()
        except SystemExit as exc:
            if exc.code:
                msg = f"Could not start relay on {host}:{port}"
                code = exc.code if isinstance(exc.code, int) else 1
                raise CommandError(msg, returncode=code) from exc
            raise
        if not server.started:
            msg = f"Could not start relay on {host}:{port}"
            raise CommandError(msg)
        return None
