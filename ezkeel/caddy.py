"""Caddyfile generation for reverse-proxied applications."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

FIRST_APP_PORT = 8001


@dataclass
class AppRoute:
    """Maps a subdomain to an upstream container port."""

    subdomain: str = ""
    upstream_port: int = 0


def generate_caddyfile(wildcard_domain: str, apps: Iterable[AppRoute] | None = ()) -> str:
    """Return a Caddyfile with one reverse-proxy block per app.

    The global options block is always present, even with no apps.
    """
    parts = ["{\n\tadmin localhost:2019\n}\n"]
    parts.extend(
        f"\n{app.subdomain}.{wildcard_domain} {{\n"
        f"\treverse_proxy localhost:{app.upstream_port}\n"
        "}\n"
        for app in apps or ()
    )
    return "".join(parts)


def next_available_port(apps: Iterable[AppRoute] | None = ()) -> int:
    """Return the port after the highest one in use, or 8001 with no apps."""
    ports = [app.upstream_port for app in apps or ()]
    if not ports:
        return FIRST_APP_PORT
    return max(max(ports), 0) + 1