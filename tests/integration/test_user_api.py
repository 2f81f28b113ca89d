"""Integration tests for the user API and its metrics."""

import pytest
from fastapi.testclient import TestClient

from user_service.api import InMemoryUserStore, create_app


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def client(exporter, settings, store):
    return TestClient(create_app(exporter, settings=settings, store=store))


def _register(client, username="alice", password="s3cret"):
    return client.post("/api/v1/register", json={"username": username, "password": password})


class TestRegister:
    def test_register_success_records_event(self, client, metric_value):
        response = _register(client)

        assert response.status_code == 200
        assert response.json() == {"message": "alice register successfully"}
        assert metric_value(
            "app_business_events_total", event_type="register", user_id="alice"
        ) == 1

    def test_duplicate_username_rejected(self, client, metric_value):
        _register(client)

        response = _register(client, password="other")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid Username and Password"}
        assert metric_value(
            "app_business_events_total", event_type="register", user_id="alice"
        ) == 1

    def test_malformed_body_rejected(self, client, metric_value):
        response = client.post(
            "/api/v1/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert response.json() == {"message": "invalid format json"}
        assert metric_value(
            "app_http_requests_total", status="422", method="POST", endpoint="/api/v1/register"
        ) == 1


class TestLogin:
    def test_login_success_records_event(self, client, metric_value):
        _register(client)

        response = client.post("/api/v1/login", json={"username": "alice", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json() == {"message": "alice login successfully"}
        assert metric_value("app_business_events_total", event_type="login", user_id="alice") == 1

    def test_wrong_password_rejected(self, client, metric_value):
        _register(client)

        response = client.post("/api/v1/login", json={"username": "alice", "password": "wrong"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid Username and Password"}
        assert metric_value("app_business_events_total", event_type="login", user_id="alice") == 0
        assert metric_value(
            "app_http_requests_total", status="400", method="POST", endpoint="/api/v1/login"
        ) == 1

    def test_unknown_user_rejected(self, client):
        response = client.post("/api/v1/login", json={"username": "ghost", "password": "x"})

        assert response.status_code == 400

    def test_missing_field_rejected(self, client):
        response = client.post("/api/v1/login", json={"username": "alice"})

        assert response.status_code == 422
        assert response.json() == {"message": "invalid format json"}


class TestListUsers:
    def test_empty_store_reports_error(self, client, metric_value):
        response = client.get("/api/v1/users")

        assert response.status_code == 500
        assert response.json() == {"message": "data not insert yet"}
        assert metric_value(
            "app_business_events_total", event_type="get_users", user_id="system"
        ) == 0

    def test_lists_users_without_passwords(self, client, metric_value):
        _register(client, "alice")
        _register(client, "bob")

        response = client.get("/api/v1/users")

        assert response.status_code == 200
        assert response.json() == {"data": [{"username": "alice"}, {"username": "bob"}]}
        assert "s3cret" not in response.text
        assert metric_value(
            "app_business_events_total", event_type="get_users", user_id="system"
        ) == 1


def test_requests_recorded_by_route_pattern(client, metric_value):
    _register(client)
    client.post("/api/v1/login", json={"username": "alice", "password": "s3cret"})
    client.get("/api/v1/users")
    client.get("/api/v1/users")

    assert metric_value(
        "app_http_requests_total", status="200", method="POST", endpoint="/api/v1/register"
    ) == 1
    assert metric_value(
        "app_http_requests_total", status="200", method="POST", endpoint="/api/v1/login"
    ) == 1
    assert metric_value(
        "app_http_requests_total", status="200", method="GET", endpoint="/api/v1/users"
    ) == 2


def test_index_and_metrics_routes(client):
    assert client.get("/api/v1/").status_code == 200

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "app_build_info" in response.text


def test_cors_preflight_allowed(client):
    response = client.options(
        "/api/v1/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")
