import pytest

from ezkeel.dockerfile import generate_dockerfile, needs_shell, shell_to_cmd
from ezkeel.framework import Framework, FrameworkResult


def _result(framework, build="", start="", port=0, dockerfile="auto"):
    return FrameworkResult(
        framework=framework, build=build, start=start, port=port, dockerfile=dockerfile
    )


@pytest.mark.parametrize(
    "result, expected",
    [
        (
            _result(Framework.NEXTJS, "npm run build", "node .next/standalone/server.js", 3000),
            ["FROM node:", "npm run build", "EXPOSE 3000", "standalone"],
        ),
        (
            _result(Framework.VITE, "npm run build", "npx serve dist", 5173),
            ["FROM caddy:", "npm run build", "dist"],
        ),
        (
            _result(Framework.FASTAPI, "", "uvicorn main:app --host 0.0.0.0 --port 8000", 8000),
            ["FROM python:", "requirements.txt", "EXPOSE 8000"],
        ),
        (
            _result(Framework.GO, "go build -o /app/app .", "./app", 8080),
            ["FROM go", ":1.23-alpine AS builder", "CGO_ENABLED=0", "EXPOSE 8080", "go build -o /app/app"],
        ),
        (
            _result(Framework.EXPRESS, "", "node index.js", 3000),
            ["FROM node:", "npm ci", '"node"', '"index.js"'],
        ),
        (
            _result(Framework.STATIC, port=80),
            ["FROM caddy:", "COPY . /srv"],
        ),
        (
            _result(Framework.RUST, "cargo build --release", "./app", 8080),
            ["FROM rust:", "cargo build --release", "debian:bookworm-slim", "EXPOSE 8080"],
        ),
        (
            _result(
                Framework.RAILS,
                "bundle exec rake assets:precompile",
                "bundle exec rails server -b 0.0.0.0 -p 3000",
                3000,
            ),
            ["FROM ruby:", "bundle install", "EXPOSE 3000"],
        ),
        (
            _result(Framework.REMIX, "npm run build", "node ./build/server/index.js", 3000),
            ["FROM node:", "npm run build", "EXPOSE 3000"],
        ),
    ],
)
def test_generate_dockerfile_contents(result, expected):
    got = generate_dockerfile(result)
    for fragment in expected:
        assert fragment in got


def test_unknown_framework_gives_empty():
    assert generate_dockerfile(FrameworkResult(framework=Framework.UNKNOWN)) == ""


def test_existing_dockerfile_gives_empty():
    fr = FrameworkResult(framework=Framework.DOCKERFILE, dockerfile="Dockerfile")
    assert generate_dockerfile(fr) == ""


def test_static_dockerfile_exact():
    got = generate_dockerfile(_result(Framework.STATIC, port=80))
    assert got == (
        "FROM caddy:2-alpine\n"
        "COPY . /srv\n"
        "EXPOSE 80\n"
        'CMD ["caddy", "file-server", "--root", "/srv"]\n'
    )


def test_go_build_override():
    fr = _result(
        Framework.GO,
        "go build -tags=embed -o /app/app ./cmd/server",
        "/app/app --port 9000",
        9000,
    )
    got = generate_dockerfile(fr)
    assert "go build -tags=embed -o /app/app ./cmd/server" in got
    assert '"/app/app", "--port", "9000"' in got
    assert "EXPOSE 9000" in got


def test_go_empty_start_falls_back_to_app_binary():
    got = generate_dockerfile(_result(Framework.GO, port=8080))
    assert 'CMD ["./app"]' in got
    assert "RUN go build -o /app/app ." in got


def test_rust_build_override():
    fr = _result(
        Framework.RUST,
        "cargo build --release --features prod",
        "./app --bind 0.0.0.0:9000",
        9000,
    )
    got = generate_dockerfile(fr)
    assert "cargo build --release --features prod" in got
    assert '"./app", "--bind", "0.0.0.0:9000"' in got


@pytest.mark.parametrize(
    "framework, start, port",
    [
        (Framework.NEXTJS, "node server.js", 3000),
        (Framework.VITE, "npx serve dist", 5173),
        (Framework.REMIX, "node ./build/server/index.js", 3000),
    ],
)
def test_build_override_honoured(framework, start, port):
    got = generate_dockerfile(_result(framework, "pnpm build", start, port))
    assert "RUN pnpm build" in got


def test_nextjs_default_build_when_empty():
    got = generate_dockerfile(_result(Framework.NEXTJS, "", "", 3000))
    assert "RUN npm run build" in got
    assert 'CMD ["node", "server.js"]' in got


def test_express_build_override():
    out = generate_dockerfile(
        _result(Framework.EXPRESS, "npm run build", "node dist/index.js", 3000)
    )
    assert "RUN npm run build" in out
    assert "npm ci --omit=dev" not in out
    assert "dist/index.js" in out


def test_express_no_build():
    out = generate_dockerfile(_result(Framework.EXPRESS, "", "node index.js", 3000))
    assert "RUN npm run build" not in out
    assert "npm ci --omit=dev" in out


@pytest.mark.parametrize("framework", [Framework.HONO, Framework.FASTIFY])
def test_hono_and_fastify_build_override(framework):
    out = generate_dockerfile(_result(framework, "npm run build", "node dist/server.js", 3000))
    assert "RUN npm run build" in out
    assert "npm ci --omit=dev" not in out


def test_shell_to_cmd_simple_is_exec_form():
    assert shell_to_cmd("node index.js") == '["node", "index.js"]'


@pytest.mark.parametrize(
    "command",
    [
        'sh -c "python manage.py migrate && gunicorn app:app"',
        "node server.js | tee /var/log/app.log",
        "flask run --port=5000 ; gunicorn",
        "bash -c 'echo hello && exit 0'",
        "/app/server > /var/log/app.log 2>&1",
        "/app/run --env=$NODE_ENV",
    ],
)
def test_shell_to_cmd_shell_meta_is_verbatim(command):
    got = shell_to_cmd(command)
    assert not got.startswith("[")
    assert got == command


def test_shell_to_cmd_empty():
    assert shell_to_cmd("") == "[]"


@pytest.mark.parametrize(
    "command",
    ["a && b", "a || b", 'echo "x"', "echo 'x'", "a | b", "a > b", "a < b", "a ; b", "a $X", "echo `date`"],
)
def test_needs_shell_true(command):
    assert needs_shell(command) is True


@pytest.mark.parametrize(
    "command",
    [
        "node index.js",
        "uvicorn main:app --host 0.0.0.0 --port 8000",
        "flask run --host=0.0.0.0 --port=5000",
        "python manage.py runserver 0.0.0.0:8000",
        "/app/server",
        "./app",
        "bundle exec rails server -b 0.0.0.0 -p 3000",
    ],
)
def test_needs_shell_false(command):
    assert needs_shell(command) is False


@pytest.mark.parametrize(
    "command",
    [
        "NODE_ENV=production node server.js",
        "PORT=8080 ./app",
        "FOO=bar BAR=baz ./binary --flag",
        "_PRIVATE=x ./run",
        "DATABASE_URL=postgres://... node migrate",
    ],
)
def test_needs_shell_env_assignment(command):
    assert needs_shell(command) is True


@pytest.mark.parametrize(
    "command",
    [
        "uvicorn main:app --host=0.0.0.0",
        "node server.js --port=3000",
        "flask run --host=0.0.0.0 --port=5000",
        "ls --color=auto",
        "lowercase_var=value ./app",
    ],
)
def test_needs_shell_flag_with_equals_stays_exec(command):
    assert needs_shell(command) is False


def test_shell_to_cmd_env_assignment_is_shell_form():
    got = shell_to_cmd("NODE_ENV=production node server.js")
    assert not got.startswith("[")
    assert got == "NODE_ENV=production node server.js"


def test_python_shell_start():
    fr = _result(
        Framework.FASTAPI,
        "",
        'sh -c "python manage.py migrate && gunicorn app:app"',
        8000,
    )
    got = generate_dockerfile(fr)
    assert 'CMD sh -c "python manage.py migrate && gunicorn app:app"' in got
    assert 'CMD ["sh", "-c", "\\"python"' not in got


def test_python_build_step_included():
    fr = _result(
        Framework.DJANGO,
        "python manage.py collectstatic --noinput",
        "python manage.py runserver 0.0.0.0:8000",
        8000,
    )
    got = generate_dockerfile(fr)
    assert "RUN python manage.py collectstatic --noinput\nEXPOSE 8000\n" in got
    assert 'CMD ["python", "manage.py", "runserver", "0.0.0.0:8000"]' in got