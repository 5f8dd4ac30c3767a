from __future__ import annotations

import json

from tests.conftest import add_inventory, create_recipe


def test_create_and_get_recipe(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    assert recipe["name"] == "Pancakes"
    assert [i["ingredient_name"] for i in recipe["ingredients"]] == ["Flour", "Eggs", "Blueberries"]
    assert recipe["ingredients"][2]["is_optional"] is True
    assert recipe["tags"] == ["breakfast"]

    fetched = client.get(f"/api/recipes/{recipe['id']}", headers=auth_headers).json()
    assert fetched == recipe


def test_recipe_names_are_unique_per_user(client, auth_headers, other_headers):
    create_recipe(client, auth_headers)
    resp = client.post("/api/recipes", json={"name": "pancakes", "default_servings": 2}, headers=auth_headers)
    assert resp.status_code == 409
    create_recipe(client, other_headers)


def test_search_by_query_and_tag(client, auth_headers):
    create_recipe(client, auth_headers)
    create_recipe(
        client,
        auth_headers,
        name="Tomato soup",
        tags=["dinner"],
        ingredients=[{"ingredient_name": "tomatoes", "quantity": 6, "unit": "piece"}],
    )
    by_ingredient = client.get("/api/recipes", params={"q": "tomato"}, headers=auth_headers).json()
    assert [r["name"] for r in by_ingredient] == ["Tomato soup"]
    by_tag = client.get("/api/recipes", params={"tag": "Breakfast"}, headers=auth_headers).json()
    assert [r["name"] for r in by_tag] == ["Pancakes"]
    assert len(client.get("/api/recipes", headers=auth_headers).json()) == 2


def test_partial_update_keeps_ingredients_unless_given(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    updated = client.put(
        f"/api/recipes/{recipe['id']}", json={"description": "Fluffy"}, headers=auth_headers
    ).json()
    assert updated["description"] == "Fluffy"
    assert len(updated["ingredients"]) == 3

    replaced = client.put(
        f"/api/recipes/{recipe['id']}",
        json={"ingredients": [{"ingredient_name": "Oats", "quantity": 1, "unit": "cup"}]},
        headers=auth_headers,
    ).json()
    assert [i["ingredient_name"] for i in replaced["ingredients"]] == ["Oats"]


def test_ingredient_sub_resources(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    added = client.post(
        f"/api/recipes/{recipe['id']}/ingredients",
        json={"ingredient_name": "Milk", "quantity": 300, "unit": "ml"},
        headers=auth_headers,
    )
    assert added.status_code == 201
    milk = added.json()["ingredients"][-1]
    assert milk["ingredient_name"] == "Milk"

    changed = client.put(f"/api/recipes/ingredients/{milk['id']}", json={"quantity": 250}, headers=auth_headers)
    assert changed.json()["ingredients"][-1]["quantity"] == 250

    removed = client.delete(f"/api/recipes/ingredients/{milk['id']}", headers=auth_headers)
    assert [i["ingredient_name"] for i in removed.json()["ingredients"]] == ["Flour", "Eggs", "Blueberries"]
    assert client.delete(f"/api/recipes/ingredients/{milk['id']}", headers=auth_headers).status_code == 404


def test_delete_recipe(client, auth_headers, other_headers):
    recipe = create_recipe(client, auth_headers)
    assert client.delete(f"/api/recipes/{recipe['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/recipes/{recipe['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/recipes/{recipe['id']}", headers=auth_headers).status_code == 404


def test_scaled_recipe(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    resp = client.get(f"/api/recipes/{recipe['id']}/scaled", params={"servings": 2}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["scaling_factor"] == 0.5
    assert [i["scaled_quantity"] for i in body["ingredients"]] == [1, 1, 50]

    too_many = client.get(f"/api/recipes/{recipe['id']}/scaled", params={"servings": 51}, headers=auth_headers)
    assert too_many.status_code == 400


def test_availability_and_prepare(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    flour = add_inventory(client, auth_headers, "flour", 1, "cup")
    eggs = add_inventory(client, auth_headers, "eggs", 6, "piece")

    check = client.get(f"/api/recipes/{recipe['id']}/availability", headers=auth_headers).json()
    assert check["can_prepare"] is False
    assert check["missing"] == [{"name": "Flour", "needed": 2, "available": 1, "unit": "cup"}]

    failed = client.post(f"/api/recipes/{recipe['id']}/prepare", json={"servings": 4}, headers=auth_headers).json()
    assert failed["success"] is False
    assert failed["errors"] == ["Cannot prepare recipe: missing ingredients - Flour"]
    assert client.get(f"/api/inventory/{eggs['id']}", headers=auth_headers).json()["quantity"] == 6

    prepared = client.post(f"/api/recipes/{recipe['id']}/prepare", json={"servings": 2}, headers=auth_headers).json()
    assert prepared["success"] is True
    assert [d["name"] for d in prepared["deducted"]] == ["Flour", "Eggs"]
    assert client.get(f"/api/inventory/{flour['id']}", headers=auth_headers).json()["quantity"] == 0
    assert client.get(f"/api/inventory/{eggs['id']}", headers=auth_headers).json()["quantity"] == 5


def test_prepare_rolls_back_on_partial_failure(client, auth_headers):
    recipe = create_recipe(
        client,
        auth_headers,
        name="Double flour",
        default_servings=1,
        ingredients=[
            {"ingredient_name": "flour", "quantity": 1, "unit": "cup"},
            {"ingredient_name": "flour", "quantity": 1, "unit": "cup"},
        ],
    )
    flour = add_inventory(client, auth_headers, "flour", 1.5, "cup")
    check = client.get(f"/api/recipes/{recipe['id']}/availability", headers=auth_headers).json()
    assert check["can_prepare"] is False
    assert check["missing"] == [{"name": "flour", "needed": 1, "available": 0.5, "unit": "cup"}]

    result = client.post(f"/api/recipes/{recipe['id']}/prepare", json={"servings": 1}, headers=auth_headers).json()
    assert result["success"] is False
    assert result["deducted"] == []
    assert client.get(f"/api/inventory/{flour['id']}", headers=auth_headers).json()["quantity"] == 1.5


def test_prepare_validates_servings(client, auth_headers):
    recipe = create_recipe(client, auth_headers)
    resp = client.post(f"/api/recipes/{recipe['id']}/prepare", json={"servings": 0}, headers=auth_headers)
    assert resp.status_code == 400


def test_import_recipes_from_json_file(client, auth_headers):
    create_recipe(client, auth_headers)
    payload = {
        "recipes": [
            {
                "title": "Guacamole",
                "servings": "2",
                "ingredients": [{"name": "Avocados", "amount": 2, "unit": "pcs"}],
                "steps": ["Mash", "Season"],
                "tags": ["snack"],
            },
            {"name": "Pancakes", "default_servings": 4},
            {"description": "no name"},
        ]
    }
    resp = client.post(
        "/api/recipes/import",
        files={"file": ("recipes.json", json.dumps(payload).encode(), "application/json")},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    result = resp.json()
    assert result["imported"] == 1
    assert result["total"] == 3
    assert len(result["skipped"]) == 2

    guacamole = client.get("/api/recipes", params={"q": "guac"}, headers=auth_headers).json()[0]
    assert guacamole["default_servings"] == 2
    assert guacamole["instructions"] == "Mash\nSeason"
    assert guacamole["ingredients"][0]["unit"] == "piece"


def test_import_rejects_invalid_json(client, auth_headers):
    resp = client.post(
        "/api/recipes/import",
        files={"file": ("recipes.json", b"{not json", "application/json")},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid JSON file"


def test_import_treats_null_fields_as_missing(client, auth_headers):
    payload = [
        {"name": "Toast", "default_servings": 1, "ingredients": None},
        {"name": "Jam toast", "default_servings": 1, "tags": None, "steps": None},
        {"name": "Broken", "ingredients": "bread, butter"},
        {"name": "Butter toast", "ingredients": [{"name": "Butter", "amount": 10, "unit": 5}]},
    ]
    resp = client.post(
        "/api/recipes/import",
        files={"file": ("recipes.json", json.dumps(payload).encode(), "application/json")},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    result = resp.json()
    assert result["imported"] == 3
    assert result["total"] == 4
    assert result["skipped"] == ["Broken: ingredients must be a list"]

    toast = client.get("/api/recipes", params={"q": "jam"}, headers=auth_headers).json()[0]
    assert toast["tags"] == []
    assert toast["ingredients"] == []
    butter = client.get("/api/recipes", params={"q": "butter toast"}, headers=auth_headers).json()[0]
    assert butter["ingredients"][0]["unit"] == ""
