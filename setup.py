from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup  # type: ignore


ROOT = Path(__file__).resolve().parent
STATIC_DIR = ROOT / "src" / "memrest" / "_static"


def _check_static_assets() -> None:
    """The web UI is plain files shipped inside the package; fail early if it went missing."""

    if not (STATIC_DIR / "index.html").exists():
        raise SystemExit(f"Missing {STATIC_DIR / 'index.html'}")


_check_static_assets()

setup(
    name="memrest",
    version="0.1.0",
    description="Minimal HTTP server exposing in-memory resource collections through a uniform REST convention",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"memrest": ["_static/*", "data/*.json"]},
    include_package_data=True,
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2.5",
        "uvicorn>=0.27",
        "httpx>=0.27",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["memrest=memrest.__main__:main"],
    },
)
