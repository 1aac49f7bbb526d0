"""Developer console scripts.

Usage (from project root):
  runserver --host=0.0.0.0 --port=8000 --no-reload
  run-tests [pytest args]
  migrate [alembic args]   # defaults to `alembic upgrade head`
  init-env                 # copies .env.example -> .env if missing
"""
from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Dict, List

ROOT = Path(__file__).resolve().parents[1]


def _args() -> List[str]:
    return sys.argv[1:]


def _server_options(args: List[str]) -> Dict[str, object]:
    options: Dict[str, object] = {"host": "127.0.0.1", "port": 8000, "reload": True}
    for a in args:
        if a.startswith("--host="):
            options["host"] = a.split("=", 1)[1]
        elif a.startswith("--port="):
            value = a.split("=", 1)[1]
            if not value.isdigit():
                raise SystemExit(f"Invalid port: {value}")
            options["port"] = int(value)
        elif a == "--no-reload":
            options["reload"] = False
        elif a == "--reload":
            options["reload"] = True
        else:
            raise SystemExit(f"Unknown option: {a}")
    return options


def runserver() -> None:
    """Serve vetconnect.main:app with uvicorn."""
    import uvicorn

    options = _server_options(_args())
    print(f"Starting VetConnect on {options['host']}:{options['port']} (reload={options['reload']})")
    uvicorn.run("vetconnect.main:app", **options)


def run_tests() -> None:
    subprocess.run(["pytest", *_args()], check=True, cwd=ROOT)


def run_migrations() -> None:
    cmd = ["alembic", *(_args() or ["upgrade", "head"])]
    subprocess.run(cmd, check=True, cwd=ROOT)


def init_env() -> None:
    src = ROOT / ".env.example"
    dst = ROOT / ".env"
    if dst.exists():
        print(f".env already exists at {dst}")
        return
    if not src.exists():
        print(f".env.example not found at {src}")
        return
    shutil.copy(src, dst)
    print(f"Created .env from .env.example at {dst}")


COMMANDS = {
    "runserver": runserver,
    "run-tests": run_tests,
    "test": run_tests,
    "migrate": run_migrations,
    "init-env": init_env,
}


if __name__ == "__main__":
    # python -m vetconnect.cli runserver --port=9000
    if len(sys.argv) <= 1:
        print(__doc__)
        sys.exit(0)
    command = COMMANDS.get(sys.argv.pop(1))
    if command is None:
        print(__doc__)
        sys.exit(1)
    command()
