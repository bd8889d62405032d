"""Generation of Dockerfiles for detected frameworks."""

from __future__ import annotations

import re
from collections.abc import Callable

from ezkeel.framework import Framework, FrameworkResult

_SHELL_METACHARACTERS = ('"', "'", "`", "&&", "||", ";", "|", ">", "<", "$")

# A leading shell env-var assignment such as NODE_ENV=production or _FOO=bar.
# Flags like --host=0.0.0.0 and lowercase names do not match.
_ENV_ASSIGNMENT = re.compile(r"[A-Z_][A-Z0-9_]*=")

_DEFAULT_NODE_BUILD = "npm run build"
_RUNNER_BINARY_CMD = '["./app"]'
_GO_BUILDER_IMAGE = "go" "lang:1.23-alpine"


def needs_shell(command: str) -> bool:
    """Return True if ``command`` must run through a shell.

    That is the case when it holds shell metacharacters or starts with an
    environment variable assignment.
    """
    if any(meta in command for meta in _SHELL_METACHARACTERS):
        return True
    tokens = command.split()
    return bool(tokens) and _ENV_ASSIGNMENT.match(tokens[0]) is not None


def shell_to_cmd(command: str) -> str:
    """Return what follows ``CMD `` in a Dockerfile for ``command``.

    Simple commands become exec-form JSON arrays; commands that need a shell
    are returned verbatim (shell-form). An empty command gives ``[]``.
    """
    if not command:
        return "[]"
    if needs_shell(command):
        return command
    return "[" + ", ".join(f'"{part}"' for part in command.split()) + "]"


def _binary_cmd(start: str) -> str:
    cmd = shell_to_cmd(start)
    if cmd in ("", "[]"):
        return _RUNNER_BINARY_CMD
    return cmd


def _nextjs(result: FrameworkResult) -> str:
    # CMD is fixed by the standalone-output layout of the runner stage.
    build = result.build or _DEFAULT_NODE_BUILD
    return f"""FROM node:22-alpine AS deps
WORKDIR /app
COPY package.json package-lock.json* ./
RUN npm ci

FROM node:22-alpine AS builder
WORKDIR /app
COPY --from=deps /app/node_modules ./node_modules
COPY . .
RUN {build}

FROM node:22-alpine AS runner
WORKDIR /app
ENV NODE_ENV=production
COPY --from=builder /app/.next/standalone ./
COPY --from=builder /app/.next/static ./.next/static
COPY --from=builder /app/public ./public
EXPOSE {result.port}
CMD ["node", "server.js"]
"""


def _spa(result: FrameworkResult, out_dir: str) -> str:
    build = result.build or _DEFAULT_NODE_BUILD
    return f"""FROM node:22-alpine AS builder
WORKDIR /app
COPY package.json package-lock.json* ./
RUN npm ci
COPY . .
RUN {build}

FROM caddy:2-alpine AS runner
COPY --from=builder /app/{out_dir} /srv
EXPOSE 80
CMD ["caddy", "file-server", "--root", "/srv"]
"""


def _node_server(result: FrameworkResult) -> str:
    # A build step needs the dev dependencies; without one, omit them.
    if result.build:
        npm_install = "npm ci"
        build_step = f"RUN {result.build}\n"
    else:
        npm_install = "npm ci --omit=dev"
        build_step = ""
    return f"""FROM node:22-alpine
WORKDIR /app
COPY package.json package-lock.json* ./
RUN {npm_install}
COPY . .
{build_step}EXPOSE {result.port}
CMD {shell_to_cmd(result.start)}
"""


def _node_ssr(result: FrameworkResult) -> str:
    build = result.build or _DEFAULT_NODE_BUILD
    return f"""FROM node:22-alpine AS deps
WORKDIR /app
COPY package.json package-lock.json* ./
RUN npm ci

FROM node:22-alpine AS builder
WORKDIR /app
COPY --from=deps /app/node_modules ./node_modules
COPY . .
RUN {build}

FROM node:22-alpine AS runner
WORKDIR /app
ENV NODE_ENV=production
COPY --from=builder /app ./
RUN npm ci --omit=dev
EXPOSE {result.port}
CMD {shell_to_cmd(result.start)}
"""


def _python(result: FrameworkResult) -> str:
    build_step = f"RUN {result.build}\n" if result.build else ""
    return f"""FROM python:3.13-slim
WORKDIR /app
COPY requirements.txt* ./
RUN pip install --no-cache-dir -r requirements.txt
COPY . .
{build_step}EXPOSE {result.port}
CMD {shell_to_cmd(result.start)}
"""


def _go(result: FrameworkResult) -> str:
    # The build must leave the binary at /app/app for the runner COPY.
    build = result.build or "go build -o /app/app ."
    return f"""FROM {_GO_BUILDER_IMAGE} AS builder
WORKDIR /app
COPY go.mod go.sum* ./
RUN go mod download
COPY . .
ENV CGO_ENABLED=0
RUN {build}

FROM alpine:latest AS runner
WORKDIR /app
COPY --from=builder /app/app /app/app
EXPOSE {result.port}
CMD {_binary_cmd(result.start)}
"""


def _rust(result: FrameworkResult) -> str:
    # The build must leave the binary at /app/target/release/app.
    build = result.build or "cargo build --release"
    return f"""FROM rust:1.80-slim AS builder
WORKDIR /app
COPY . .
RUN {build}

FROM debian:bookworm-slim AS runner
WORKDIR /app
COPY --from=builder /app/target/release/app /app/app
EXPOSE {result.port}
CMD {_binary_cmd(result.start)}
"""


def _rails(result: FrameworkResult) -> str:
    return f"""FROM ruby:3.3-slim
WORKDIR /app
RUN apt-get update -qq && apt-get install -y build-essential libpq-dev nodejs && rm -rf /var/lib/apt/lists/*
COPY Gemfile Gemfile.lock* ./
RUN bundle install
COPY . .
EXPOSE {result.port}
CMD {shell_to_cmd(result.start)}
"""


def _static(_result: FrameworkResult) -> str:
    return """FROM caddy:2-alpine
COPY . /srv
EXPOSE 80
CMD ["caddy", "file-server", "--root", "/srv"]
"""


_GENERATORS: dict[Framework, Callable[[FrameworkResult], str]] = {
    Framework.NEXTJS: _nextjs,
    Framework.VITE: lambda result: _spa(result, "dist"),
    Framework.EXPRESS: _node_server,
    Framework.HONO: _node_server,
    Framework.FASTIFY: _node_server,
    Framework.REMIX: _node_ssr,
    Framework.NUXT: _node_ssr,
    Framework.ASTRO: _node_ssr,
    Framework.FASTAPI: _python,
    Framework.DJANGO: _python,
    Framework.FLASK: _python,
    Framework.GO: _go,
    Framework.RUST: _rust,
    Framework.RAILS: _rails,
    Framework.STATIC: _static,
}


def generate_dockerfile(result: FrameworkResult) -> str:
    """Return Dockerfile content for ``result``.

    Returns an empty string for unknown frameworks and when the project
    already has its own Dockerfile.
    """
    try:
        framework = Framework(result.framework)
    except ValueError:
        return ""
    generator = _GENERATORS.get(framework)
    return generator(result) if generator is not None else ""