from __future__ import annotations

from pathlib import Path

from ..api.responses import HttpResponse, bytes_response, content_type_for, error_response


class StaticResolver:
    """Serve files from a directory, keyed by extension.

    Extensions without a known content type are refused with 401 so the
    server never hands out arbitrary files.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def __call__(self, path: str) -> HttpResponse:
        rel = path.lstrip("/")
        if not rel or rel.endswith("/"):
            rel += "index.html"

        content_type = content_type_for(rel)
        if content_type is None:
            return error_response(401, f"Not allowed: /{rel}")

        target = (self.root / rel).resolve()
        if not target.is_relative_to(self.root) or not target.is_file():
            return error_response(404, f"File not found: /{rel}")

        return bytes_response(200, content_type, target.read_bytes())


def packaged_static_root() -> Path:
    """Location of the bundled web UI (`memrest/_static`)."""

    from importlib import resources as importlib_resources

    root = importlib_resources.files("memrest").joinpath("_static")
    with importlib_resources.as_file(root) as root_path:
        root_path = Path(root_path)
    if not (root_path / "index.html").exists():
        raise FileNotFoundError(f"memrest static assets are missing. Expected {root_path / 'index.html'}")
    return root_path
