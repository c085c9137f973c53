"""Login helpers for end-to-end tests."""

from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient


def github_login(client: TestClient, callback: str | None = None):
    """Run both legs of a GitHub login with the mock client.

    Returns:
        The response of the callback request
    """
    params = {"callback": callback} if callback else {}
    dispatch = client.get("/auth/login/github", params=params, follow_redirects=False)
    assert dispatch.status_code == 302

    state = parse_qs(urlsplit(dispatch.headers["location"]).query)["state"][0]
    return client.get(
        "/auth/login/github/callback",
        params={"code": "mock-code", "state": state},
        follow_redirects=False,
    )


def login_token(client: TestClient) -> str:
    """Log in as the mock GitHub user and return the bearer token."""
    response = github_login(client)
    assert response.status_code == 200
    return response.json()["token"]
