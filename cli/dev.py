"""CLI wrapper: Start development server."""

from __future__ import annotations

import sys

from cli._runner import run


def main() -> None:
    run(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "geac_api.main:app",
            "--reload",
            "--host",
            "127.0.0.1",
            "--port",
            "8080",
            *sys.argv[1:],
        ]
    )
