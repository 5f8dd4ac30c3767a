from __future__ import annotations

from typing import Dict

import pytest
from fastapi.testclient import TestClient

from core.config import settings
from core.database import init_db


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Ny SQLite-fil per test."""
    monkeypatch.setattr(settings, "database_path", tmp_path / "kitchen_pal.db")
    init_db()
    return settings.database_path


@pytest.fixture
def client(database) -> TestClient:
    from app import app

    return TestClient(app)


def register_user(client: TestClient, email: str = "cook@example.com", password: str = "secret-pass") -> Dict[str, str]:
    resp = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "first_name": "Test", "last_name": "Cook"},
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def auth_headers(client) -> Dict[str, str]:
    return register_user(client)


@pytest.fixture
def other_headers(client) -> Dict[str, str]:
    return register_user(client, email="neighbour@example.com")


def create_recipe(client: TestClient, headers: Dict[str, str], **overrides) -> dict:
    payload = {
        "name": "Pancakes",
        "default_servings": 4,
        "instructions": "Mix\nFry",
        "ingredients": [
            {"ingredient_name": "Flour", "quantity": 2, "unit": "cup"},
            {"ingredient_name": "Eggs", "quantity": 2, "unit": "piece"},
            {"ingredient_name": "Blueberries", "quantity": 100, "unit": "g", "is_optional": True},
        ],
        "tags": ["breakfast"],
    }
    payload.update(overrides)
    resp = client.post("/api/recipes", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_inventory(client: TestClient, headers: Dict[str, str], name: str, quantity: float, unit: str, **extra) -> dict:
    resp = client.post(
        "/api/inventory",
        json={"ingredient_name": name, "quantity": quantity, "unit": unit, **extra},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
