from decimal import Decimal


def _create_product(client, **overrides):
    payload = {
        "name": "Denim Jacket",
        "brand": "Levis",
        "cost_price": "60.00",
        "sell_price": "100.00",
        "quantity": 5,
        "category_id": None,
        "supplier_id": None,
    }
    payload.update(overrides)
    response = client.post("/api/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_product_is_returned_with_category_and_supplier(client):
    category = client.post("/api/categories", json={"name": "Outerwear"}).json()
    supplier = client.post(
        "/api/suppliers",
        json={"name": "Mumbai Textiles", "contact": "022-5550101", "address": "Dadar"},
    ).json()

    product = _create_product(client, category_id=category["id"], supplier_id=supplier["id"])

    fetched = client.get(f"/api/products/{product['id']}").json()
    assert fetched["category"]["name"] == "Outerwear"
    assert fetched["supplier"]["name"] == "Mumbai Textiles"
    assert fetched["quantity"] == 5


def test_get_missing_product_is_404(client):
    assert client.get("/api/products/123").status_code == 404


def test_product_with_unknown_category_is_404(client):
    response = client.post(
        "/api/products",
        json={"name": "Cap", "cost_price": "5", "sell_price": "10", "category_id": 77},
    )

    assert response.status_code == 404


def test_update_product_fields(client):
    product = _create_product(client)

    response = client.put(
        f"/api/products/{product['id']}",
        json={
            "name": "Denim Jacket Blue",
            "brand": "Levis",
            "cost_price": 65,
            "sell_price": 120,
            "quantity": 8,
            "category_id": None,
            "supplier_id": None,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Denim Jacket Blue"
    assert body["sell_price"] == 120.0
    assert body["quantity"] == 8


def test_partial_update_leaves_other_fields(client):
    product = _create_product(client)

    body = client.put(f"/api/products/{product['id']}", json={"quantity": 2}).json()

    assert body["quantity"] == 2
    assert body["name"] == "Denim Jacket"


def test_update_rejects_negative_quantity(client):
    product = _create_product(client)

    response = client.put(f"/api/products/{product['id']}", json={"quantity": -1})

    assert response.status_code == 422


def test_update_rejects_clearing_required_field(client):
    product = _create_product(client)

    response = client.put(f"/api/products/{product['id']}", json={"name": None})

    assert response.status_code == 400


def test_list_products_search_matches_name_or_brand(client):
    _create_product(client, name="Denim Jacket", brand="Levis")
    _create_product(client, name="Silk Scarf", brand="Fabindia")

    names = [p["name"] for p in client.get("/api/products", params={"search": "fabin"}).json()]
    assert names == ["Silk Scarf"]

    assert len(client.get("/api/products").json()) == 2


def test_delete_product_keeps_sale_history_readable(client):
    product = _create_product(client)
    sale = client.post(
        "/api/sales",
        json={
            "items": [
                {"product_id": product["id"], "quantity_sold": 1, "sell_price": "100.00", "total_price": "100.00"}
            ],
            "total_amount": "100.00",
        },
    )
    assert sale.status_code == 201

    response = client.delete(f"/api/products/{product['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    sales = client.get("/api/sales")
    assert sales.status_code == 200
    item = sales.json()[0]["items"][0]
    assert item["product"] is None
    assert item["product_id"] is None
    assert Decimal(item["total_price"]) == Decimal("100")

    assert client.get("/api/dashboard").status_code == 200


def test_delete_missing_product_is_404(client):
    assert client.delete("/api/products/5").status_code == 404


def test_category_crud_and_duplicate_name(client):
    created = client.post("/api/categories", json={"name": "Footwear"})
    assert created.status_code == 201
    category_id = created.json()["id"]

    assert client.post("/api/categories", json={"name": "Footwear"}).status_code == 409

    renamed = client.put(f"/api/categories/{category_id}", json={"name": "Shoes"})
    assert renamed.json()["name"] == "Shoes"

    assert [c["name"] for c in client.get("/api/categories").json()] == ["Shoes"]


def test_deleting_category_or_supplier_detaches_products(client):
    category = client.post("/api/categories", json={"name": "Accessories"}).json()
    supplier = client.post("/api/suppliers", json={"name": "Jaipur Crafts"}).json()
    product = _create_product(client, category_id=category["id"], supplier_id=supplier["id"])

    assert client.delete(f"/api/categories/{category['id']}").json() == {"success": True}
    assert client.delete(f"/api/suppliers/{supplier['id']}").json() == {"success": True}

    fetched = client.get(f"/api/products/{product['id']}").json()
    assert fetched["category"] is None
    assert fetched["category_id"] is None
    assert fetched["supplier_id"] is None


def test_supplier_update_and_search(client):
    supplier = client.post("/api/suppliers", json={"name": "Delhi Denims"}).json()
    client.post("/api/suppliers", json={"name": "Surat Silks"})

    updated = client.put(f"/api/suppliers/{supplier['id']}", json={"contact": "011-4440000"}).json()
    assert updated["contact"] == "011-4440000"
    assert updated["name"] == "Delhi Denims"

    found = client.get("/api/suppliers", params={"search": "silk"}).json()
    assert [s["name"] for s in found] == ["Surat Silks"]

    assert client.put("/api/suppliers/999", json={"name": "X"}).status_code == 404
