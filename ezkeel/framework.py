"""Detection of an application's framework and its build/start defaults."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Framework(str, Enum):
    """An application framework that can be detected or declared."""

    DOCKERFILE = "dockerfile"
    NEXTJS = "nextjs"
    VITE = "vite"
    EXPRESS = "express"
    HONO = "hono"
    FASTIFY = "fastify"
    REMIX = "remix"
    NUXT = "nuxt"
    ASTRO = "astro"
    FASTAPI = "fastapi"
    DJANGO = "django"
    FLASK = "flask"
    GO = "go"
    RUST = "rust"
    RAILS = "rails"
    STATIC = "static"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass
class FrameworkResult:
    """A detected framework with its recommended build and start settings."""

    framework: Framework = Framework.UNKNOWN
    build: str = ""
    start: str = ""
    port: int = 0
    dockerfile: str = ""


# framework -> (build, start, port); every entry uses a generated Dockerfile.
_DEFAULTS: dict[Framework, tuple[str, str, int]] = {
    Framework.GO: ("go build -o /app/app .", "./app", 8080),
    Framework.RUST: ("cargo build --release", "./app", 8080),
    Framework.STATIC: ("", "", 80),
    Framework.NEXTJS: ("npm run build", "node .next/standalone/server.js", 3000),
    Framework.REMIX: ("npm run build", "node ./build/server/index.js", 3000),
    Framework.NUXT: ("npm run build", "node .output/server/index.mjs", 3000),
    Framework.ASTRO: ("npm run build", "node ./dist/server/entry.mjs", 4321),
    Framework.VITE: ("npm run build", "npx serve dist", 5173),
    Framework.EXPRESS: ("", "node index.js", 3000),
    Framework.HONO: ("npm run build", "node dist/index.js", 3000),
    Framework.FASTIFY: ("", "node index.js", 3000),
    Framework.FASTAPI: ("", "uvicorn main:app --host 0.0.0.0 --port 8000", 8000),
    Framework.DJANGO: (
        "python manage.py collectstatic --noinput",
        "python manage.py runserver 0.0.0.0:8000",
        8000,
    ),
    Framework.FLASK: ("", "flask run --host=0.0.0.0 --port=5000", 5000),
    Framework.RAILS: (
        "bundle exec rake assets:precompile",
        "bundle exec rails server -b 0.0.0.0 -p 3000",
        3000,
    ),
}

# Checked in order: SSR meta-frameworks, then SPA bundlers, then servers.
_NODE_FRAMEWORKS: tuple[tuple[Framework, tuple[str, ...]], ...] = (
    (Framework.NEXTJS, ("next",)),
    (Framework.REMIX, ("@remix-run/node", "@remix-run/react", "remix")),
    (Framework.NUXT, ("nuxt", "nuxt3")),
    (Framework.ASTRO, ("astro",)),
    (Framework.VITE, ("vite", "@vitejs/plugin-react", "@vitejs/plugin-vue")),
    (Framework.EXPRESS, ("express",)),
    (Framework.HONO, ("hono",)),
    (Framework.FASTIFY, ("fastify",)),
)

# FastAPI comes before Flask because both may appear together.
_PYTHON_FRAMEWORKS: tuple[tuple[Framework, str], ...] = (
    (Framework.FASTAPI, "fastapi"),
    (Framework.DJANGO, "django"),
    (Framework.FLASK, "flask"),
)


@dataclass
class PackageJSON:
    """The dependency sections of a Node.js package.json."""

    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    def has_dep(self, name: str) -> bool:
        """Return True if ``name`` is a dependency or a dev dependency."""
        return name in self.dependencies or name in self.dev_dependencies


def _string_map(value: object) -> dict[str, str] | None:
    if value is None:
        return {}
    if not isinstance(value, dict):
        return None
    if not all(isinstance(v, str) for v in value.values()):
        return None
    return dict(value)


def read_package_json(directory: str | os.PathLike) -> PackageJSON | None:
    """Read ``package.json`` in ``directory``; None if missing or malformed."""
    try:
        data = json.loads(Path(directory, "package.json").read_bytes())
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    deps = _string_map(data.get("dependencies"))
    dev_deps = _string_map(data.get("devDependencies"))
    if deps is None or dev_deps is None:
        return None
    return PackageJSON(dependencies=deps, dev_dependencies=dev_deps)


def _read_text(path: Path) -> str | None:
    try:
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError:
        return None


def _detect_node(directory: Path) -> FrameworkResult | None:
    package = read_package_json(directory)
    if package is None:
        return None
    for framework, deps in _NODE_FRAMEWORKS:
        if any(package.has_dep(dep) for dep in deps):
            return defaults_for(framework)
    return None


def _detect_python(directory: Path) -> FrameworkResult | None:
    texts = [_read_text(directory / name) for name in ("requirements.txt", "pyproject.toml")]
    if all(text is None for text in texts):
        return None
    combined = "".join(text or "" for text in texts).lower()
    for framework, word in _PYTHON_FRAMEWORKS:
        if word in combined:
            return defaults_for(framework)
    return None


def _detect_rails(directory: Path) -> FrameworkResult | None:
    text = _read_text(directory / "Gemfile")
    if text is not None and "rails" in text.lower():
        return defaults_for(Framework.RAILS)
    return None


def detect_framework(directory: str | os.PathLike) -> FrameworkResult:
    """Scan ``directory`` and return the best-matching framework.

    Priority: Dockerfile, package.json, Python requirements, go.mod,
    Cargo.toml, a Gemfile naming rails, index.html, then unknown.
    """
    root = Path(directory)
    if (root / "Dockerfile").exists():
        return FrameworkResult(framework=Framework.DOCKERFILE, dockerfile="Dockerfile")

    result = _detect_node(root) or _detect_python(root)
    if result is not None:
        return result

    if (root / "go.mod").exists():
        return defaults_for(Framework.GO)
    if (root / "Cargo.toml").exists():
        return defaults_for(Framework.RUST)

    result = _detect_rails(root)
    if result is not None:
        return result

    if (root / "index.html").exists():
        return defaults_for(Framework.STATIC)

    return FrameworkResult(framework=Framework.UNKNOWN)


def defaults_for(framework: Framework | str) -> FrameworkResult | None:
    """Return the canonical settings for ``framework``.

    Returns None for the unknown and Dockerfile frameworks and for any name
    that is not a known framework.
    """
    try:
        key = Framework(framework)
    except ValueError:
        return None
    entry = _DEFAULTS.get(key)
    if entry is None:
        return None
    build, start, port = entry
    return FrameworkResult(
        framework=key, build=build, start=start, port=port, dockerfile="auto"
    )