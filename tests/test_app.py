def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_ready_checks_the_store(client, store):
    assert client.get("/ready").status_code == 200

    store.fail("select", "committees")
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}


def test_routes_are_versioned(client):
    paths = {route.path for route in client.app.routes}
    for path in ("/api/v1/auth/login", "/api/v1/weeks", "/api/v1/dashboard/summary",
                 "/api/v1/projects/{project_id}/submission"):
        assert path in paths


def test_only_config_is_a_regular_package():
    import app
    import app.config
    import app.modules

    # implicit namespace packages, apart from config which re-exports settings
    assert getattr(app, "__file__", None) is None
    assert getattr(app.modules, "__file__", None) is None
    assert app.config.__file__.endswith("__init__.py")
