from sqlalchemy import func, select

from app.models import ApparelDetails, Product


PRODUCT_FORM = {
    "name": "Blue Hoodie",
    "description": "Warm cotton hoodie",
    "price": "999",
    "stock_quantity": "3",
    "category": "Men's Clothing",
    "subcategories": ["mens-tops"],
    "apparelDetails": {"brand": "Acme", "material": "Cotton"},
    "selectedSizes": ["M"],
    "selectedFitTypes": ["Regular"],
    "images": [{"image_url": "https://cdn.test/hoodie.jpg"}],
}


async def test_health_is_public(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_admin_routes_need_a_token(client, catalog):
    response = await client.post("/api/v1/admin/products", json=PRODUCT_FORM)

    assert response.status_code == 401
    assert "Not authenticated" in response.json()["error"]


async def test_bad_token_is_rejected(client, catalog):
    response = await client.post(
        "/api/v1/admin/products", json=PRODUCT_FORM, headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token provided!"}


async def test_identity_headers_are_not_trusted(client, catalog, admin_user):
    response = await client.post(
        "/api/v1/admin/products",
        json=PRODUCT_FORM,
        headers={"Authorization": "Bearer forged", "X-User-Id": str(admin_user.id)},
    )

    assert response.status_code == 401


async def test_non_admin_is_forbidden(client, catalog, customer_headers):
    response = await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=customer_headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden: Admin access required"}


async def test_create_product_from_form(client, catalog, admin_headers, session_factory):
    response = await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    product = body["product"]
    assert product["slug"] == "blue-hoodie"
    assert product["category_id"] == str(catalog.mens.id)
    assert product["subcategory_id"] == str(catalog.tops.id)
    assert product["stock_quantity"] == 3
    assert product["in_stock"] is True
    assert product["image_url"] == "https://cdn.test/hoodie.jpg"
    assert product["images"][0]["display_order"] == 0

    async with session_factory() as session:
        details = (await session.execute(select(ApparelDetails))).scalars().one()
    assert details.material == "Cotton"
    assert details.size == "M"


async def test_invalid_form_returns_field_errors(client, catalog, admin_headers, session_factory):
    form = dict(PRODUCT_FORM, price="-5", selectedSizes=[])

    response = await client.post("/api/v1/admin/products", json=form, headers=admin_headers)

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Product form is invalid"
    assert set(body["errors"]) == {"price", "sizes"}

    async with session_factory() as session:
        assert (await session.execute(select(func.count()).select_from(Product))).scalar() == 0


async def test_unknown_subcategory_returns_400(client, catalog, admin_headers):
    form = dict(PRODUCT_FORM, subcategories=["Shoes"])

    response = await client.post("/api/v1/admin/products", json=form, headers=admin_headers)

    assert response.status_code == 400
    assert "Shoes" in response.json()["error"]


async def test_raw_create_product(client, catalog, admin_headers):
    payload = {
        "product": {
            "name": "Red Shirt",
            "slug": "red-shirt",
            "price": 25,
            "stock_quantity": 0,
            "is_active": True,
            "show_in_hero": True,
            "category_id": str(catalog.mens.id),
            "subcategory_id": str(catalog.tops.id),
        },
        "images": [],
    }

    first = await client.post("/api/v1/admin/create-product", json=payload, headers=admin_headers)
    second = await client.post("/api/v1/admin/create-product", json=payload, headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["product"]["slug"] == "red-shirt"
    assert first.json()["product"]["in_stock"] is False
    assert second.json()["product"]["slug"] == "red-shirt-1"


async def test_category_admin_flow(client, admin_headers):
    response = await client.post(
        "/api/v1/admin/categories",
        json={"name": "Phones & Tablets", "detail_type": "mobile"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    category = response.json()
    assert category["slug"] == "phones-tablets"
    assert category["detail_type"] == "mobile"

    response = await client.post(
        "/api/v1/admin/subcategories",
        json={"name": "Screen Guards", "parent_category_id": category["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["parent_category_id"] == category["id"]

    response = await client.get("/api/v1/admin/categories", headers=admin_headers)
    assert [c["name"] for c in response.json()] == ["Phones & Tablets", "Screen Guards"]

    response = await client.delete(f"/api/v1/admin/categories/{category['id']}", headers=admin_headers)
    assert response.status_code == 409


async def test_storefront_reads_are_public(client, catalog, admin_headers):
    await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=admin_headers)

    tree = (await client.get("/api/v1/categories")).json()
    assert {node["name"] for node in tree} == {"Men's Clothing", "Mobile Accessories", "Gadgets", "Gifts"}

    listing = (await client.get("/api/v1/products", params={"category": "men-s-clothing"})).json()
    assert listing["total"] == 1
    assert listing["items"][0]["slug"] == "blue-hoodie"

    response = await client.get("/api/v1/products/blue-hoodie")
    assert response.status_code == 200
    assert response.json()["name"] == "Blue Hoodie"

    response = await client.get("/api/v1/products/no-such-product")
    assert response.status_code == 404


async def test_stock_and_status_updates(client, catalog, admin_headers):
    created = await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=admin_headers)
    product_id = created.json()["product"]["id"]

    response = await client.patch(
        f"/api/v1/admin/products/{product_id}/stock", json={"stock_quantity": 0}, headers=admin_headers
    )
    assert response.json()["in_stock"] is False

    response = await client.patch(
        f"/api/v1/admin/products/{product_id}/stock", json={"stock_quantity": -1}, headers=admin_headers
    )
    assert response.status_code == 422

    response = await client.patch(
        f"/api/v1/admin/products/{product_id}/status", json={"is_active": False}, headers=admin_headers
    )
    assert response.json()["is_active"] is False
    assert (await client.get("/api/v1/products/blue-hoodie")).status_code == 404

    response = await client.delete(f"/api/v1/admin/products/{product_id}", headers=admin_headers)
    assert response.json()["success"] is True


async def test_root_is_public(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


async def test_middleware_rejects_admin_reads_without_header(client):
    response = await client.get("/api/v1/admin/categories")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated! Please login again to proceed."}


async def test_storefront_writes_are_not_public(client):
    response = await client.post("/api/v1/products", json={})

    assert response.status_code == 401
    assert "Not authenticated" in response.json()["error"]


async def test_edit_product_from_form(client, catalog, admin_headers, session_factory):
    created = (await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=admin_headers)).json()
    product_id = created["product"]["id"]
    image_id = created["product"]["images"][0]["id"]

    form = dict(
        PRODUCT_FORM,
        name="Navy Hoodie",
        selectedSizes=["S", "M"],
        images=[
            {"image_url": "https://cdn.test/navy.jpg"},
            {"id": image_id, "image_url": "https://cdn.test/hoodie.jpg"},
        ],
    )
    response = await client.patch(f"/api/v1/admin/products/{product_id}", json=form, headers=admin_headers)

    assert response.status_code == 200
    product = response.json()["product"]
    assert product["slug"] == "navy-hoodie"
    assert [image["image_url"] for image in product["images"]] == [
        "https://cdn.test/navy.jpg",
        "https://cdn.test/hoodie.jpg",
    ]
    assert product["images"][1]["id"] == image_id

    async with session_factory() as session:
        details = (await session.execute(select(ApparelDetails))).scalars().one()
    assert details.size == "S,M"


async def test_edit_product_validation_and_missing_product(client, catalog, admin_headers):
    created = (await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=admin_headers)).json()
    product_id = created["product"]["id"]

    response = await client.patch(
        f"/api/v1/admin/products/{product_id}", json=dict(PRODUCT_FORM, price="0"), headers=admin_headers
    )
    assert response.status_code == 422
    assert "price" in response.json()["errors"]

    response = await client.patch(
        "/api/v1/admin/products/00000000-0000-0000-0000-000000000000", json=PRODUCT_FORM, headers=admin_headers
    )
    assert response.status_code == 404


async def test_product_image_endpoints(client, catalog, admin_headers):
    created = (await client.post("/api/v1/admin/products", json=PRODUCT_FORM, headers=admin_headers)).json()
    product_id = created["product"]["id"]

    response = await client.post(
        f"/api/v1/admin/products/{product_id}/images",
        json=[{"image_url": "https://cdn.test/extra.jpg", "display_order": 1}],
        headers=admin_headers,
    )
    assert response.status_code == 201
    image_id = response.json()[0]["id"]

    response = await client.delete(f"/api/v1/admin/products/{product_id}/images/{image_id}", headers=admin_headers)
    assert response.json() == {"success": True, "message": "Image deleted successfully"}

    response = await client.delete(f"/api/v1/admin/products/{product_id}/images/{image_id}", headers=admin_headers)
    assert response.status_code == 404
