import pytest
from sqlalchemy import event, insert

from shoplist.db.models import Category

from conftest import auth


@pytest.fixture
def admin(client, admin_token):
	def _call(method, url, **kwargs):
		return client.request(method, url, headers=auth(admin_token), **kwargs)

	return _call


def new_category(admin, name, **extra):
	response = admin("POST", "/categories/admin", json={"name": name, **extra})
	assert response.status_code == 201, response.text
	return response.json()["category"]


def new_product(admin, name, category_id, **extra):
	response = admin("POST", "/products/admin", json={"name": name, "categoryId": category_id, **extra})
	assert response.status_code == 201, response.text
	return response.json()["product"]


def test_catalog_mutations_are_admin_only(client, register):
	_, token = register("alice")
	assert client.post("/categories/admin", json={"name": "Dairy"}, headers=auth(token)).status_code == 403
	assert client.post("/categories/admin", json={"name": "Dairy"}).status_code == 401
	assert client.get("/products/admin", headers=auth(token)).status_code == 403


def test_category_sort_order_defaults_to_next(admin):
	first = new_category(admin, "Dairy")
	second = new_category(admin, "Bakery")
	explicit = new_category(admin, "Drinks", sortOrder=10)
	after = new_category(admin, "Frozen")
	assert first["sortOrder"] == 1
	assert second["sortOrder"] == 2
	assert explicit["sortOrder"] == 10
	assert after["sortOrder"] == 11


def test_category_name_conflict_ignores_icon_and_order(admin):
	new_category(admin, "Dairy", icon="🥛", sortOrder=1)
	response = admin("POST", "/categories/admin", json={"name": " Dairy ", "icon": "🧀", "sortOrder": 5})
	assert response.status_code == 409
	assert response.json() == {"error": "A category with this name already exists"}


def test_update_category(admin):
	dairy = new_category(admin, "Dairy", icon="🥛")
	bakery = new_category(admin, "Bakery")
	response = admin("PUT", f"/categories/admin/{dairy['id']}", json={"name": "Milk & Eggs"})
	assert response.status_code == 200
	assert response.json()["category"]["name"] == "Milk & Eggs"
	assert response.json()["category"]["sortOrder"] == dairy["sortOrder"]

	clash = admin("PUT", f"/categories/admin/{dairy['id']}", json={"name": "Bakery"})
	assert clash.status_code == 409
	assert admin("PUT", f"/categories/admin/{bakery['id']}", json={"name": "Bakery"}).status_code == 200
	assert admin("PUT", "/categories/admin/999", json={"name": "Nope"}).status_code == 404


def test_category_delete_refused_with_product_count(admin):
	dairy = new_category(admin, "Dairy")
	new_product(admin, "Milk", dairy["id"])
	new_product(admin, "Cheese", dairy["id"])

	response = admin("DELETE", f"/categories/admin/{dairy['id']}")
	assert response.status_code == 409
	assert "2 products" in response.json()["error"]

	empty = new_category(admin, "Empty")
	assert admin("DELETE", f"/categories/admin/{empty['id']}").status_code == 200


def test_public_category_listing_has_counts(client, admin):
	dairy = new_category(admin, "Dairy")
	new_category(admin, "Bakery")
	new_product(admin, "Milk", dairy["id"])

	categories = client.get("/categories").json()["categories"]
	assert [(c["name"], c["productCount"]) for c in categories] == [("Dairy", 1), ("Bakery", 0)]


def test_product_name_unique_within_category(admin):
	dairy = new_category(admin, "Dairy")
	bakery = new_category(admin, "Bakery")
	new_product(admin, "Butter", dairy["id"])

	response = admin("POST", "/products/admin", json={"name": "Butter", "categoryId": dairy["id"]})
	assert response.status_code == 409
	assert new_product(admin, "Butter", bakery["id"])["categoryId"] == bakery["id"]


def test_product_validation(admin):
	dairy = new_category(admin, "Dairy")
	assert admin("POST", "/products/admin", json={"name": "", "categoryId": dairy["id"]}).status_code == 400
	assert admin("POST", "/products/admin", json={"name": "Milk"}).status_code == 400
	assert admin("POST", "/products/admin", json={"name": "Milk", "categoryId": 999}).status_code == 404


def test_update_product(admin):
	dairy = new_category(admin, "Dairy")
	bakery = new_category(admin, "Bakery")
	milk = new_product(admin, "Milk", dairy["id"], unit="l")
	new_product(admin, "Bread", bakery["id"])

	moved = admin("PUT", f"/products/admin/{milk['id']}", json={"name": "Milk", "categoryId": bakery["id"]})
	assert moved.status_code == 200
	assert moved.json()["product"]["category"]["name"] == "Bakery"
	clash = admin("PUT", f"/products/admin/{milk['id']}", json={"name": "Bread", "categoryId": bakery["id"]})
	assert clash.status_code == 409


def test_product_in_use_cannot_be_deleted(client, admin, register, create_list):
	dairy = new_category(admin, "Dairy")
	milk = new_product(admin, "Milk", dairy["id"])
	_, token = register("alice")
	shopping_list = create_list(token)
	item = client.post(
		f"/shopping-lists/{shopping_list['id']}/items",
		json={"name": "Milk", "productId": milk["id"]},
		headers=auth(token),
	).json()["item"]

	response = admin("DELETE", f"/products/admin/{milk['id']}")
	assert response.status_code == 409
	assert "1 items" in response.json()["error"]

	client.delete(f"/items/{item['id']}", headers=auth(token))
	assert admin("DELETE", f"/products/admin/{milk['id']}").status_code == 200


def test_product_search(client, admin):
	dairy = new_category(admin, "Dairy")
	bakery = new_category(admin, "Bakery")
	new_product(admin, "Milk", dairy["id"])
	new_product(admin, "Buttermilk", dairy["id"])
	new_product(admin, "Bread", bakery["id"])

	found = client.get("/products", params={"search": "MILK"}).json()["products"]
	assert [p["name"] for p in found] == ["Buttermilk", "Milk"]
	in_bakery = client.get("/products", params={"categoryId": bakery["id"]}).json()["products"]
	assert [p["name"] for p in in_bakery] == ["Bread"]


def test_add_category_to_list(client, admin, register, create_list):
	dairy = new_category(admin, "Dairy")
	new_product(admin, "Milk", dairy["id"])
	new_product(admin, "Cheese", dairy["id"])
	_, token = register("alice")
	shopping_list = create_list(token)
	client.post(f"/shopping-lists/{shopping_list['id']}/items", json={"name": "milk"}, headers=auth(token))

	response = client.post(f"/shopping-lists/{shopping_list['id']}/categories/{dairy['id']}", headers=auth(token))
	assert response.status_code == 200
	data = response.json()
	assert [i["name"] for i in data["added"]] == ["Cheese"]
	assert data["added"][0]["productId"] is not None
	assert data["failedCount"] == 1

	missing = client.post(f"/shopping-lists/{shopping_list['id']}/categories/999", headers=auth(token))
	assert missing.status_code == 404


def test_recommendations_skip_empty_categories(client, admin, register):
	dairy = new_category(admin, "Dairy", icon="🥛")
	new_category(admin, "Empty")
	new_product(admin, "Milk", dairy["id"])
	_, token = register("alice")

	response = client.get("/recommendations", headers=auth(token))
	assert response.status_code == 200
	assert response.json()["recommendations"] == [
		{"categoryId": dairy["id"], "category": "Dairy", "icon": "🥛", "items": ["Milk"]}
	]
	assert client.get("/recommendations").status_code == 401


def test_category_created_concurrently_is_conflict(client, admin, session_factory):
	# another writer commits the same name after the existence check ran
	def insert_duplicate(session, flush_context, instances):
		for obj in session.new:
			if isinstance(obj, Category):
				session.connection().execute(insert(Category).values(name=obj.name, sort_order=99))

	event.listen(session_factory, "before_flush", insert_duplicate)
	try:
		response = admin("POST", "/categories/admin", json={"name": "Dairy"})
	finally:
		event.remove(session_factory, "before_flush", insert_duplicate)

	assert response.status_code == 409
	assert response.json() == {"error": "A category with this name already exists"}
	assert client.get("/categories").json()["categories"] == []


def test_product_search_treats_wildcards_literally(client, admin):
	dairy = new_category(admin, "Dairy")
	new_product(admin, "Milk", dairy["id"])
	new_product(admin, "Milk 100%", dairy["id"])

	assert [p["name"] for p in client.get("/products", params={"search": "%"}).json()["products"]] == ["Milk 100%"]
	assert client.get("/products", params={"search": "_"}).json()["products"] == []
