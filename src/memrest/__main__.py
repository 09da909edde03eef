from __future__ import annotations

import argparse
import time
from importlib import metadata

from .runtime.config import Settings
from .runtime.server import run
from .services.loader import DEFAULT_DATA, SERVICE_FACTORIES


def _version() -> str:
    try:
        return metadata.version("memrest")
    except metadata.PackageNotFoundError:
        return "<unknown>"


def _parse_data(values: list[str] | None) -> dict[str, str | None]:
    if not values:
        return dict(DEFAULT_DATA)
    out: dict[str, str | None] = {}
    for value in values:
        name, sep, path = value.partition("=")
        name = name.strip()
        if not name:
            raise argparse.ArgumentTypeError(f"Invalid --data value: {value!r} (expected NAME=PATH)")
        if name not in SERVICE_FACTORIES:
            known = ", ".join(sorted(SERVICE_FACTORIES))
            raise argparse.ArgumentTypeError(f"Unknown resource in --data: {name!r} (known: {known})")
        out[name] = (path.strip() or None) if sep else None
    return out


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="memrest", description="Run a simple in-memory REST + static file server.")
    p.add_argument("--host", default=settings.host)
    p.add_argument("--port", type=int, default=settings.port, help="port number (default: %(default)s)")
    p.add_argument("--no-browser", action="store_true", help="do not try to open a browser")
    p.add_argument("--demo", action="store_true", help="demo mode: data is reset periodically")
    p.add_argument(
        "--data",
        action="append",
        metavar="NAME=PATH",
        help="serve resource NAME seeded from a JSON array file (repeatable; default: persons)",
    )
    p.add_argument("--timeout", type=float, default=settings.timeout_s, help="seconds to wait for a service result")
    p.add_argument("--log-level", default=settings.log_level, choices=["debug", "info", "warning", "error"])
    p.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return p


def main(argv: list[str] | None = None) -> None:
    settings = Settings.from_env()
    p = build_parser(settings)
    args = p.parse_args(argv)
    try:
        data = _parse_data(args.data)
    except argparse.ArgumentTypeError as e:
        p.error(str(e))

    srv = run(
        host=args.host,
        port=args.port,
        open_browser=not args.no_browser,
        data=data,
        demo=args.demo,
        timeout=args.timeout,
        log_level=args.log_level,
        new_server=True,
        settings=settings,
    )
    print(f"Visit `{srv.url}`")
    print("Press Ctrl-C to exit ...")

    try:
        while srv.is_running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass

    print("Shutting down the server ...")
    if srv.stop():
        print("Server is successfully stopped.")


if __name__ == "__main__":
    main()
