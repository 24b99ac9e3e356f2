import pytest

from shoplist.services.list_service import clamp_quantity

from conftest import auth


@pytest.fixture
def alice_list(register, create_list):
	_, token = register("alice")
	return token, create_list(token)


def add(client, token, list_id, name, **extra):
	return client.post(f"/shopping-lists/{list_id}/items", json={"name": name, **extra}, headers=auth(token))


def test_add_item_defaults(client, alice_list):
	token, shopping_list = alice_list
	response = add(client, token, shopping_list["id"], " Milk ")
	assert response.status_code == 201
	item = response.json()["item"]
	assert item["name"] == "Milk"
	assert item["quantity"] == 1
	assert item["purchased"] is False
	assert item["listId"] == shopping_list["id"]


def test_add_item_requires_name(client, alice_list):
	token, shopping_list = alice_list
	response = add(client, token, shopping_list["id"], "")
	assert response.status_code == 400


@pytest.mark.parametrize("given,expected", [(None, 1), (0, 1), (-3, 1), (1, 1), (7, 7)])
def test_clamp_quantity(given, expected):
	assert clamp_quantity(given) == expected


def test_quantity_is_clamped(client, alice_list):
	token, shopping_list = alice_list
	response = add(client, token, shopping_list["id"], "Eggs", quantity=0)
	assert response.json()["item"]["quantity"] == 1


def test_duplicate_names_are_allowed(client, alice_list):
	token, shopping_list = alice_list
	assert add(client, token, shopping_list["id"], "Milk").status_code == 201
	assert add(client, token, shopping_list["id"], "Milk").status_code == 201
	items = client.get(f"/shopping-lists/{shopping_list['id']}", headers=auth(token)).json()["shoppingList"]["items"]
	assert [i["name"] for i in items] == ["Milk", "Milk"]


def test_unknown_product_is_not_found(client, alice_list):
	token, shopping_list = alice_list
	response = add(client, token, shopping_list["id"], "Milk", productId=42)
	assert response.status_code == 404
	assert response.json() == {"error": "Product not found"}


def test_toggle_twice_restores_state(client, alice_list):
	token, shopping_list = alice_list
	item = add(client, token, shopping_list["id"], "Milk").json()["item"]
	first = client.patch(f"/items/{item['id']}/toggle", headers=auth(token)).json()["item"]
	second = client.patch(f"/items/{item['id']}/toggle", headers=auth(token)).json()["item"]
	assert first["purchased"] is True
	assert second["purchased"] is False


def test_update_item(client, alice_list):
	token, shopping_list = alice_list
	item = add(client, token, shopping_list["id"], "Milk").json()["item"]
	response = client.put(f"/items/{item['id']}", json={"quantity": 3}, headers=auth(token))
	assert response.status_code == 200
	assert response.json()["item"]["quantity"] == 3
	assert response.json()["item"]["name"] == "Milk"

	response = client.put(f"/items/{item['id']}", json={"name": "  "}, headers=auth(token))
	assert response.status_code == 400


def test_delete_item(client, alice_list):
	token, shopping_list = alice_list
	item = add(client, token, shopping_list["id"], "Milk").json()["item"]
	assert client.delete(f"/items/{item['id']}", headers=auth(token)).status_code == 200
	assert client.delete(f"/items/{item['id']}", headers=auth(token)).status_code == 404


def test_items_of_other_lists_are_hidden(client, register, alice_list):
	token, shopping_list = alice_list
	_, bob = register("bob")
	item = add(client, token, shopping_list["id"], "Milk").json()["item"]
	assert client.patch(f"/items/{item['id']}/toggle", headers=auth(bob)).status_code == 404
	assert client.delete(f"/items/{item['id']}", headers=auth(bob)).status_code == 404
	assert add(client, bob, shopping_list["id"], "Cheese").status_code == 404


def test_deselect_all(client, alice_list):
	token, shopping_list = alice_list
	ids = [add(client, token, shopping_list["id"], name).json()["item"]["id"] for name in ("A", "B", "C")]
	for item_id in ids[:2]:
		client.patch(f"/items/{item_id}/toggle", headers=auth(token))

	response = client.patch(f"/shopping-lists/{shopping_list['id']}/deselect-all", headers=auth(token))
	assert response.status_code == 200
	items = response.json()["items"]
	assert len(items) == 3
	assert [i["id"] for i in items] == ids
	assert all(i["purchased"] is False for i in items)


def test_bulk_add_reports_partial_failure(client, alice_list):
	token, shopping_list = alice_list
	add(client, token, shopping_list["id"], "Milk")
	response = client.post(
		f"/shopping-lists/{shopping_list['id']}/items/bulk",
		json={"items": [
			{"name": "Bread"},
			{"name": "milk"},
			{"name": ""},
			{"name": "Eggs", "quantity": 12},
			{"name": "Bread"},
			{"name": "Ham", "productId": 999},
		]},
		headers=auth(token),
	)
	assert response.status_code == 200
	data = response.json()
	assert [i["name"] for i in data["added"]] == ["Bread", "Eggs"]
	assert data["addedCount"] == 2
	assert data["failedCount"] == 4
	errors = {row["name"]: row["error"] for row in data["failed"]}
	assert errors["milk"] == "Item is already in the list"
	assert errors["Ham"] == "Product not found"

	items = client.get(f"/shopping-lists/{shopping_list['id']}", headers=auth(token)).json()["shoppingList"]["items"]
	assert len(items) == 3


def test_null_quantity_defaults_to_one(client, alice_list):
	token, shopping_list = alice_list
	response = add(client, token, shopping_list["id"], "Milk", quantity=None)
	assert response.status_code == 201
	assert response.json()["item"]["quantity"] == 1

	bulk = client.post(
		f"/shopping-lists/{shopping_list['id']}/items/bulk",
		json={"items": [{"name": "Bread", "quantity": None}]},
		headers=auth(token),
	)
	assert bulk.json()["added"][0]["quantity"] == 1


def test_oversized_quantity_is_rejected(client, alice_list):
	token, shopping_list = alice_list
	response = add(client, token, shopping_list["id"], "Milk", quantity=10**20)
	assert response.status_code == 400
	assert response.json()["error"].startswith("quantity:")

	item = add(client, token, shopping_list["id"], "Eggs").json()["item"]
	update = client.put(f"/items/{item['id']}", json={"quantity": 10**20}, headers=auth(token))
	assert update.status_code == 400
