from __future__ import annotations

from core.config import settings
from tests.conftest import add_inventory, create_recipe, register_user


def _review(client, headers, recipe_id, rating=4, comment="Fluffy"):
    return client.post(f"/api/recipes/{recipe_id}/reviews", json={"rating": rating, "comment": comment}, headers=headers)


def test_review_lifecycle(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    created = _review(client, auth_headers, recipe["id"])
    assert created.status_code == 201
    review = created.json()
    assert review["rating"] == 4
    assert review["recipe_name"] == "Pancakes"
    assert review["reviewer_name"] == "Test Cook"

    listing = client.get(f"/api/recipes/{recipe['id']}/reviews", headers=auth_headers).json()
    assert listing["total_reviews"] == 1
    assert listing["average_rating"] == 4
    assert [r["id"] for r in listing["reviews"]] == [review["id"]]

    updated = client.put(f"/api/reviews/{review['id']}", json={"rating": 5}, headers=auth_headers).json()
    assert updated["rating"] == 5
    assert updated["comment"] == "Fluffy"

    mine = client.get("/api/reviews/my-reviews", headers=auth_headers).json()
    assert [r["id"] for r in mine] == [review["id"]]

    assert client.delete(f"/api/reviews/{review['id']}", headers=auth_headers).status_code == 204
    assert client.delete(f"/api/reviews/{review['id']}", headers=auth_headers).status_code == 404
    empty = client.get(f"/api/recipes/{recipe['id']}/reviews", headers=auth_headers).json()
    assert empty["total_reviews"] == 0
    assert empty["average_rating"] is None


def test_one_review_per_recipe(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    first = _review(client, auth_headers, recipe["id"]).json()
    again = _review(client, auth_headers, recipe["id"], rating=1)
    assert again.status_code == 409
    assert again.json()["error"]["details"]["existing_review_id"] == first["id"]


def test_rating_must_be_one_to_five(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    assert _review(client, auth_headers, recipe["id"], rating=0).status_code == 400
    assert _review(client, auth_headers, recipe["id"], rating=6).status_code == 400
    review = _review(client, auth_headers, recipe["id"]).json()
    assert client.put(f"/api/reviews/{review['id']}", json={"rating": None}, headers=auth_headers).status_code == 400


def test_reviews_follow_recipe_ownership(client, auth_headers, other_headers):
    recipe = create_recipe(client, auth_headers)
    review = _review(client, auth_headers, recipe["id"]).json()

    assert _review(client, other_headers, recipe["id"]).status_code == 404
    assert client.get(f"/api/recipes/{recipe['id']}/reviews", headers=other_headers).status_code == 404
    assert client.put(f"/api/reviews/{review['id']}", json={"rating": 1}, headers=other_headers).status_code == 404

    client.delete(f"/api/recipes/{recipe['id']}", headers=auth_headers)
    assert client.get("/api/reviews/my-reviews", headers=auth_headers).json() == []


def test_review_sorting(client, auth_headers):
    pancakes = create_recipe(client, auth_headers)
    soup = create_recipe(client, auth_headers, name="Soup")
    _review(client, auth_headers, pancakes["id"], rating=2)
    _review(client, auth_headers, soup["id"], rating=5)

    by_rating = client.get(
        "/api/reviews/my-reviews", params={"sort_by": "rating", "sort_order": "asc"}, headers=auth_headers
    ).json()
    assert [r["recipe_name"] for r in by_rating] == ["Pancakes", "Soup"]
    bad = client.get("/api/reviews/my-reviews", params={"sort_by": "comment"}, headers=auth_headers)
    assert bad.status_code == 400


def test_admin_reports_require_admin_email(client, auth_headers, monkeypatch):
    assert client.get("/api/admin/dashboard", headers=auth_headers).status_code == 403
    assert client.get("/api/admin/dashboard").status_code == 401

    monkeypatch.setattr(settings, "admin_emails", {"cook@example.com"})
    assert client.get("/api/admin/dashboard", headers=auth_headers).status_code == 200


def test_admin_dashboard_and_user_reports(client, auth_headers, other_headers, monkeypatch):
    monkeypatch.setattr(settings, "admin_emails", {"cook@example.com"})
    recipe = create_recipe(client, other_headers)
    _review(client, other_headers, recipe["id"])
    add_inventory(client, other_headers, "flour", 1, "kg")
    register_user(client, email="baker@example.com")

    dashboard = client.get("/api/admin/dashboard", headers=auth_headers).json()
    assert dashboard["stats"]["users"] == 3
    assert dashboard["stats"]["recipes"] == 1
    assert dashboard["stats"]["reviews"] == 1
    assert dashboard["stats"]["inventory_items"] == 1
    assert len(dashboard["recent_users"]) == 3

    found = client.get("/api/admin/users", params={"q": "NEIGHBOUR"}, headers=auth_headers).json()
    assert found["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}
    neighbour = found["users"][0]
    assert neighbour["email"] == "neighbour@example.com"
    assert neighbour["counts"]["recipes"] == 1
    assert neighbour["counts"]["inventory_items"] == 1

    paged = client.get("/api/admin/users", params={"limit": 2, "page": 2}, headers=auth_headers).json()
    assert len(paged["users"]) == 1
    assert paged["pagination"]["pages"] == 2

    details = client.get(f"/api/admin/users/{neighbour['id']}", headers=auth_headers).json()
    assert details["counts"] == neighbour["counts"]
    assert client.get("/api/admin/users/missing", headers=auth_headers).status_code == 404
