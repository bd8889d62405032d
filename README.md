# ezkeel

A library of building blocks for deploying applications to your own
servers. It works out what a project is built with and which database it
uses. It can then generate a Dockerfile for the project and a Caddyfile
that routes subdomains to it. It also keeps platform, server and app
settings on disk, and wraps the external tools and APIs involved.

## Installation

```
pip install ezkeel
```

The test suite needs the `test` extra:

```
pip install "ezkeel[test]"
pytest
```

## Configuration home

Settings live under `~/.ezkeel`. If the `EZKEEL_HOME` environment variable
is set, that directory is used instead. The following functions return the
locations in use:

- `ezkeel.globalconfig.ezkeel_home()`
- `ezkeel.globalconfig.global_config_path()`
- `ezkeel.servers.servers_dir()`
- `ezkeel.manifest.manifest_path(app_name)`

## Detecting a project and generating a Dockerfile

```python
from ezkeel.framework import detect_framework, defaults_for, Framework
from ezkeel.dockerfile import generate_dockerfile
from ezkeel.database import detect_database

result = detect_framework("path/to/project")
print(result.framework, result.port)

dockerfile = generate_dockerfile(result)   # "" for unknown or own-Dockerfile projects
db = detect_database("path/to/project")
print(db.engine, db.migrator, db.migrate_cmd)

go_defaults = defaults_for(Framework.GO)   # None for UNKNOWN, DOCKERFILE or unknown names
```

### Framework detection

`detect_framework` checks the project in this order and stops at the first
match:

1. a `Dockerfile`
2. `package.json`: Next.js, Remix, Nuxt, Astro, Vite, Express, Hono, Fastify
3. `requirements.txt` / `pyproject.toml`: FastAPI, Django, Flask
4. `go.mod`
5. `Cargo.toml`
6. a `Gemfile` naming rails
7. `index.html`

If nothing matches, the result is `Framework.UNKNOWN`.

### Database detection

`detect_database` checks, in order:

1. a Prisma schema
2. a Drizzle config
3. database clients in `package.json`
4. Python adapters in `requirements.txt`
5. a `DATABASE_URL` line in `.env.example`

### Start commands

The `CMD` line comes from the start command. `shell_to_cmd` emits plain
commands in exec form, as a JSON array. Commands that contain shell syntax
are emitted verbatim in shell form. Shell syntax means quotes, pipes,
redirects, `&&`, `;`, `$`, or a leading `NAME=value`. `needs_shell` reports
which form a command gets.

## Reverse proxy

```python
from ezkeel.caddy import AppRoute, generate_caddyfile, next_available_port

routes = [AppRoute("my-app", 8001)]
print(generate_caddyfile("deploy.example.com", routes))
print(next_available_port(routes))  # 8002; 8001 when there are no routes
```

## Servers, workspaces and app manifests

- `ezkeel.servers`
  - `save_server`, `load_server`, `list_servers` and `default_server`
    manage `Server` entries.
  - Each server is stored in its own YAML file, readable by the owner only.
  - `save_server` sets the user to `root` when it is empty.
  - `load_server` raises `ServerNotFoundError` for an unknown name.
- `ezkeel.workspace`
  - `load_workspace` reads `workspace.yaml` into a `Workspace`.
  - `find_workspace` searches the given directory and then each parent.
  - Both raise `WorkspaceError` on failure.
- `ezkeel.manifest`
  - `AppManifest.save` and `load_manifest` store and read the settings of a
    deployed app.
- `ezkeel.globalconfig`
  - `load_global_config` returns defaults when the file is missing.
  - `GlobalConfig.save` writes the file.
  - `flag_or_default` picks a flag value over a configured default.
- `ezkeel.persona`
  - `copy_persona` copies an AI persona directory tree.

## External services and tools

- `ezkeel.github_client`
  - `GitHubClient` offers `authenticated_user`, `repo_exists`,
    `create_repo` and `create_org_repo`.
  - `resolve_auth` takes a token you pass in, then `GITHUB_TOKEN`, then the
    output of `gh auth token`.
  - Errors raise `GitHubError`.
- `ezkeel.infisical`
  - `login_universal_auth` returns an `AdminClient`.
  - `AdminClient` offers `create_project` and `create_environment`.
  - Errors raise `InfisicalError`.
- `ezkeel.secretstore`
  - `SecretsClient` runs the `infisical` CLI: `export`,
    `inject_into_shell` and `run`.
  - `parse_dotenv` parses dotenv text.
- `ezkeel.devcontainer`
  - `build_dev_container`, `start_dev_container` and
    `exec_in_dev_container` run the `devcontainer` CLI.
- `ezkeel.ai`
  - `scaffold_claude_config` creates `.claude/` with `settings.json`.
  - `build_launch_command` returns the program and arguments for `claude`,
    `codex` or `ollama/MODEL`.
- `ezkeel.preflight`
  - `check_command`, `require_infisical` and `require_ai_tool` raise
    `MissingToolError` with an install hint when a tool is not on `PATH`.

## Terminal output

`ezkeel.tui` renders deploy progress with `DeployModel` (see
`new_deploy_model`). It draws summary boxes with `render_success` and
`render_failure`. Colours are used only when stdout is a terminal and
`NO_COLOR` is unset.

## What this package does not do

This package is a library only. It does not:

- install any command-line program;
- clone repositories;
- build or run containers itself;
- connect to servers over SSH;
- carry out a deployment from start to finish.

The functions above produce the files, settings and tool invocations that
such a workflow needs. Putting them together is up to the caller.