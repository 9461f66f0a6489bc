"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``create_student`` / ``create_registrar`` role-specific shortcuts.
  - ``create_document`` factory fixture for catalog entries.
  - ``auth_header`` fixture for authenticated requests (JWT).
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            user = create_user(username="alice")
            # or with all fields:
            user = create_user(
                username="bob",
                password="Str0ng!Pass",
                email="bob@example.com",
                first_name="Bob",
                last_name="Reyes",
                role=UserRole.REGISTRAR,
                admin_id="ADM-001",
            )
    """
    from accounts.models import User

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        role=None,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if email is None:
            email = f"{username}@test.local"

        user = User.objects.create_user(
            username=username,
            password=password,
            email=email,
            is_active=is_active,
            **kwargs,
        )
        if role is not None:
            user.role = role
            user.save(update_fields=["role"])
        return user

    return _factory


@pytest.fixture()
def create_student(create_user):
    """Factory for STUDENT users; ``student_id`` defaults to a unique value."""
    from accounts.models import UserRole

    _counter = 0

    def _factory(**kwargs):
        nonlocal _counter
        _counter += 1
        kwargs.setdefault("student_id", f"2025-{_counter:05d}")
        return create_user(role=UserRole.STUDENT, **kwargs)

    return _factory


@pytest.fixture()
def create_registrar(create_user):
    """Factory for REGISTRAR users."""
    from accounts.models import UserRole

    _counter = 0

    def _factory(**kwargs):
        nonlocal _counter
        _counter += 1
        kwargs.setdefault("admin_id", f"ADM-{_counter:03d}")
        return create_user(role=UserRole.REGISTRAR, **kwargs)

    return _factory


@pytest.fixture()
def create_document(db):
    """Factory for catalog ``Document`` rows with unique default names."""
    from catalog.models import Document

    _counter = 0

    def _factory(*, name: str | None = None, **kwargs) -> Document:
        nonlocal _counter
        _counter += 1
        if name is None:
            name = f"Test Document {_counter}"
        return Document.objects.create(name=name, **kwargs)

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper function that builds an ``Authorization`` header dict
    with a valid JWT access token.  Pass an existing ``user`` or the
    keyword arguments for a new one.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(username="alice")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/requests/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(*, user=None, username: str | None = None, role=None, **user_kwargs) -> dict[str, str]:
        if user is None:
            user = create_user(username=username, role=role, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make
