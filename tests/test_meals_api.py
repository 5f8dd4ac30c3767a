from __future__ import annotations

from tests.conftest import add_inventory, create_recipe


def _plan(client, headers, start="2026-03-02", end="2026-03-08", name="Week 10"):
    return client.post(
        "/api/meals/plans", json={"name": name, "start_date": start, "end_date": end}, headers=headers
    )


def test_plan_dates_must_be_ordered(client, auth_headers):
    resp = _plan(client, auth_headers, start="2026-03-08", end="2026-03-02")
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "start_date must be on or before end_date"


def test_plan_crud_and_range_filter(client, auth_headers):
    march = _plan(client, auth_headers).json()
    _plan(client, auth_headers, start="2026-04-06", end="2026-04-12", name="Week 15")

    listed = client.get("/api/meals/plans", params={"from": "2026-03-05", "to": "2026-03-20"}, headers=auth_headers)
    assert [p["name"] for p in listed.json()] == ["Week 10"]

    renamed = client.put(f"/api/meals/plans/{march['id']}", json={"name": "Lent"}, headers=auth_headers).json()
    assert renamed["name"] == "Lent"
    bad = client.put(f"/api/meals/plans/{march['id']}", json={"end_date": "2026-03-01"}, headers=auth_headers)
    assert bad.status_code == 400

    assert client.delete(f"/api/meals/plans/{march['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/meals/plans/{march['id']}", headers=auth_headers).status_code == 404


def test_planned_recipes_must_fall_inside_plan(client, auth_headers):
    plan = _plan(client, auth_headers).json()
    recipe = create_recipe(client, auth_headers)

    outside = client.post(
        f"/api/meals/plans/{plan['id']}/recipes",
        json={"recipe_id": recipe["id"], "meal_date": "2026-03-09", "meal_type": "dinner", "servings": 2},
        headers=auth_headers,
    )
    assert outside.status_code == 400

    added = client.post(
        f"/api/meals/plans/{plan['id']}/recipes",
        json={"recipe_id": recipe["id"], "meal_date": "2026-03-03", "meal_type": "breakfast", "servings": 2},
        headers=auth_headers,
    )
    assert added.status_code == 201
    planned = added.json()["recipes"]
    assert planned[0]["recipe_name"] == "Pancakes"
    assert planned[0]["meal_type"] == "breakfast"

    shrink = client.put(f"/api/meals/plans/{plan['id']}", json={"end_date": "2026-03-02"}, headers=auth_headers)
    assert shrink.status_code == 400

    removed = client.delete(f"/api/meals/plan-recipes/{planned[0]['id']}", headers=auth_headers)
    assert removed.json()["recipes"] == []


def test_shopping_list_from_plan_uses_planned_servings(client, auth_headers):
    plan = _plan(client, auth_headers).json()
    recipe = create_recipe(client, auth_headers)
    add_inventory(client, auth_headers, "eggs", 20, "piece")
    for day, servings in (("2026-03-03", 2), ("2026-03-05", 4)):
        client.post(
            f"/api/meals/plans/{plan['id']}/recipes",
            json={"recipe_id": recipe["id"], "meal_date": day, "meal_type": "breakfast", "servings": servings},
            headers=auth_headers,
        )

    body = client.post(f"/api/meals/plans/{plan['id']}/shopping-list", headers=auth_headers).json()
    assert body["created"] is True
    assert body["shopping_list"]["name"] == "Shopping for Week 10"
    items = body["shopping_list"]["items"]
    assert [(i["ingredient_name"], i["needed_quantity"], i["unit"]) for i in items] == [("flour", 3, "cup")]
    assert len(items[0]["recipe_sources"]) == 2


def test_empty_plan_cannot_generate_list(client, auth_headers):
    plan = _plan(client, auth_headers).json()
    resp = client.post(f"/api/meals/plans/{plan['id']}/shopping-list", headers=auth_headers)
    assert resp.status_code == 400
