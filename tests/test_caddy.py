from ezkeel.caddy import AppRoute, generate_caddyfile, next_available_port


def test_generate_caddyfile_single_app():
    content = generate_caddyfile(
        "deploy.example.com", [AppRoute(subdomain="my-app", upstream_port=8001)]
    )
    assert "my-app.deploy.example.com" in content
    assert "localhost:8001" in content


def test_generate_caddyfile_exact_output():
    content = generate_caddyfile(
        "deploy.example.com", [AppRoute(subdomain="my-app", upstream_port=8001)]
    )
    assert content == (
        "{\n\tadmin localhost:2019\n}\n"
        "\nmy-app.deploy.example.com {\n\treverse_proxy localhost:8001\n}\n"
    )


def test_generate_caddyfile_multiple_apps():
    content = generate_caddyfile(
        "deploy.example.com",
        [
            AppRoute(subdomain="app1", upstream_port=8001),
            AppRoute(subdomain="app2", upstream_port=8002),
        ],
    )
    assert "app1.deploy.example.com" in content
    assert "app2.deploy.example.com" in content
    assert content.index("app1.") < content.index("app2.")


def test_generate_caddyfile_empty():
    content = generate_caddyfile("deploy.example.com", None)
    assert content == "{\n\tadmin localhost:2019\n}\n"
    assert "admin localhost:2019" in content


def test_generate_caddyfile_special_chars_in_name():
    content = generate_caddyfile(
        "deploy.example.com", [AppRoute(subdomain="my-app-v2", upstream_port=8001)]
    )
    assert "my-app-v2.deploy.example.com" in content
    assert "localhost:8001" in content


def test_next_port():
    apps = [AppRoute(upstream_port=8001), AppRoute(upstream_port=8003)]
    assert next_available_port(apps) == 8004


def test_next_port_empty():
    assert next_available_port(None) == 8001
    assert next_available_port([]) == 8001


def test_next_port_sequential():
    apps = [AppRoute(upstream_port=port) for port in (8001, 8002, 8003)]
    assert next_available_port(apps) == 8004