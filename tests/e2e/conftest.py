"""E2E test fixtures for Playwright.

The pytest-playwright plugin automatically provides:
  - page: A new browser page for each test
  - context: A new browser context for each test
  - browser: A browser instance (session scope)

Override base_url with --base-url on the CLI:
    pytest -m e2e --base-url http://localhost:8000
"""

from __future__ import annotations

import subprocess
from typing import Callable, Generator
from uuid import uuid4

import pytest
from playwright.sync_api import APIRequestContext, Playwright

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\xdac\xfc\xff"
    b"\x9f\xa1\x1e\x00\x07\x82\x02\x7f=\xc8H\xef\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture(scope="session")
def base_url(request) -> str:
    """Provide base URL for Playwright tests.

    Uses --base-url CLI value if given, otherwise defaults to the
    Django dev server running inside the Docker container.
    """
    return request.config.getoption("base_url") or "http://localhost:8000"


@pytest.fixture(autouse=True)
def _use_db() -> None:
    """Override root conftest _use_db: e2e tests hit the server over HTTP,
    they do not need the pytest-django ``db`` fixture (which conflicts
    with Playwright's async event-loop)."""


@pytest.fixture(autouse=True)
def _clear_cache() -> None:
    """Override root conftest _clear_cache: the server owns its cache."""


@pytest.fixture(scope="session")
def api_request_context(
    playwright: Playwright, base_url: str
) -> Generator[APIRequestContext, None, None]:
    """Playwright API context for direct HTTP calls."""
    context = playwright.request.new_context(base_url=base_url)
    yield context
    context.dispose()


def _run_manage_py(command: str) -> None:
    subprocess.run(
        ["python", "src/manage.py", "shell", "-c", command],
        check=True,
        capture_output=True,
        text=True,
    )


def _create_user(username: str, password: str) -> None:
    command = (
        "from django.contrib.auth import get_user_model; "
        "User = get_user_model(); "
        f"User.objects.create_user(username={username!r}, password={password!r})"
    )
    _run_manage_py(command)


def _disable_user(username: str) -> None:
    # Products are never deleted, so their owners cannot be either
    command = (
        "from django.contrib.auth import get_user_model; "
        "User = get_user_model(); "
        f"User.objects.filter(username={username!r}).update(is_active=False)"
    )
    _run_manage_py(command)


@pytest.fixture()
def make_credentials() -> Generator[Callable[[], tuple[str, str]], None, None]:
    """Create throwaway users; they are disabled after the test."""
    created: list[str] = []

    def _make() -> tuple[str, str]:
        username = f"e2euser_{uuid4().hex[:8]}"
        password = "testpass123"
        _create_user(username, password)
        created.append(username)
        return username, password

    yield _make
    for username in created:
        _disable_user(username)


@pytest.fixture()
def auth_credentials(make_credentials) -> tuple[str, str]:
    """A test user and valid credentials."""
    return make_credentials()


def obtain_token(api_request_context: APIRequestContext, username: str, password: str) -> str:
    response = api_request_context.post(
        "/api/v1/auth/token/",
        data={"username": username, "password": password},
    )
    assert response.status == 200
    return response.json()["access"]


@pytest.fixture()
def auth_token(api_request_context, auth_credentials) -> str:
    """JWT access token for the test user."""
    return obtain_token(api_request_context, *auth_credentials)


@pytest.fixture()
def second_token(api_request_context, make_credentials) -> str:
    """JWT access token for a second, independent user."""
    return obtain_token(api_request_context, *make_credentials())


@pytest.fixture()
def create_product(api_request_context) -> Callable[..., dict]:
    """POST a multipart product as the holder of ``token``."""

    def _create(token: str, title: str, category: str = "e2e") -> dict:
        response = api_request_context.post(
            "/api/v1/products/",
            headers={"Authorization": f"Bearer {token}"},
            multipart={
                "title": title,
                "category": category,
                "condition": "used",
                "image": {
                    "name": "e2e.png",
                    "mimeType": "image/png",
                    "buffer": PNG_BYTES,
                },
            },
        )
        assert response.status == 201, response.text()
        return response.json()

    return _create
