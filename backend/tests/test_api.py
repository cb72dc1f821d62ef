"""
HTTP surface: auth, checkout flow and error mapping.
"""

import pytest

API = "/api/v1"

ORDER_SHIPPING = {
    "shippingName": "Ada Lovelace",
    "shippingAddress": "12 St James's Square",
    "shippingCity": "London",
    "shippingState": "Greater London",
    "shippingZip": "SW1Y 4JH",
    "shippingCountry": "UK",
}


async def register(client, username: str, admin: bool = False) -> int:
    path = f"{API}/auth/register/admin" if admin else f"{API}/auth/register"
    response = await client.post(
        path,
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret-pass",
            "fullName": username.title(),
        },
    )
    assert response.status_code == 200, response.text
    return response.json()["id"]


async def create_product(client, name: str, price: float, stock: int) -> int:
    response = await client.post(
        f"{API}/products",
        json={
            "name": name,
            "description": f"{name} description",
            "price": price,
            "stockQuantity": stock,
        },
    )
    assert response.status_code == 200, response.text
    return response.json()["id"]


# ==================== System ====================


async def test_health_reports_database(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "up"


async def test_root_lists_resources(client):
    body = (await client.get("/")).json()

    assert body["resources"]["orders"] == f"{API}/orders"


# ==================== Auth ====================


async def test_register_login_and_me(client):
    await register(client, "ada")

    response = await client.post(
        f"{API}/auth/login", json={"username": "ada", "password": "secret-pass"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "ada"
    assert body["roles"] == ["USER"]

    me = await client.get(
        f"{API}/auth/me", headers={"Authorization": f"Bearer {body['token']}"}
    )
    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"


async def test_admin_registration_grants_admin_role(client):
    await register(client, "root", admin=True)

    response = await client.post(
        f"{API}/auth/login", json={"username": "root", "password": "secret-pass"}
    )

    assert response.json()["roles"] == ["ADMIN", "USER"]


async def test_duplicate_username_rejected(client):
    await register(client, "ada")

    response = await client.post(
        f"{API}/auth/register",
        json={"username": "ada", "email": "other@example.com", "password": "secret-pass"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Username is already taken"}


async def test_bad_credentials_and_tokens(client):
    await register(client, "ada")

    response = await client.post(
        f"{API}/auth/login", json={"username": "ada", "password": "wrong"}
    )
    assert response.status_code == 401

    assert (await client.get(f"{API}/auth/me")).status_code == 401
    response = await client.get(
        f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


# ==================== Checkout ====================


async def test_checkout_flow(client):
    user_id = await register(client, "ada")
    drill = await create_product(client, "Drill", 10.00, 5)
    saw = await create_product(client, "Saw", 25.00, 1)

    response = await client.post(
        f"{API}/orders",
        json={
            "userId": user_id,
            "cartItems": {str(drill): 2, str(saw): 1},
            **ORDER_SHIPPING,
        },
    )
    assert response.status_code == 200, response.text
    order = response.json()
    assert order["total"] == 45.0
    assert order["status"] == "PENDING"
    assert len(order["orderItems"]) == 2

    product = (await client.get(f"{API}/products/{drill}")).json()
    assert product["stockQuantity"] == 3

    response = await client.post(
        f"{API}/payments/process",
        params={"userId": user_id},
        json={"orderId": order["id"], "cardToken": "pm_card_visa"},
    )
    assert response.status_code == 200, response.text
    assert response.json()["maskedCardNumber"] == "xxxx-xxxx-xxxx-4242"

    paid = (await client.get(f"{API}/orders/{order['id']}", params={"userId": user_id})).json()
    assert paid["status"] == "PAID"
    assert paid["payment"]["amount"] == 45.0

    history = (await client.get(f"{API}/payments", params={"userId": user_id})).json()
    assert [p["id"] for p in history] == [paid["payment"]["id"]]


async def test_insufficient_stock_returns_400_and_keeps_stock(client):
    user_id = await register(client, "ada")
    drill = await create_product(client, "Drill", 10.00, 5)
    saw = await create_product(client, "Saw", 25.00, 1)

    response = await client.post(
        f"{API}/orders",
        json={"userId": user_id, "cartItems": {str(drill): 2, str(saw): 3}},
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "Error creating order: Not enough stock for product: Saw"
    }
    assert (await client.get(f"{API}/products/{drill}")).json()["stockQuantity"] == 5
    assert (await client.get(f"{API}/orders", params={"userId": user_id})).json() == []


async def test_foreign_order_is_forbidden(client):
    owner = await register(client, "ada")
    stranger = await register(client, "mallory")
    drill = await create_product(client, "Drill", 10.00, 5)
    order = (
        await client.post(
            f"{API}/orders", json={"userId": owner, "cartItems": {str(drill): 1}}
        )
    ).json()

    response = await client.get(f"{API}/orders/{order['id']}", params={"userId": stranger})

    assert response.status_code == 403
    assert response.json() == {"error": "Unauthorized access to order"}


async def test_declined_payment_returns_402(client, gateway):
    user_id = await register(client, "ada")
    drill = await create_product(client, "Drill", 10.00, 5)
    order = (
        await client.post(
            f"{API}/orders", json={"userId": user_id, "cartItems": {str(drill): 1}}
        )
    ).json()
    gateway.decline = True

    response = await client.post(
        f"{API}/payments/process",
        params={"userId": user_id},
        json={"orderId": order["id"], "cardToken": "pm_card_chargeDeclined"},
    )

    assert response.status_code == 402
    order = (await client.get(f"{API}/orders/{order['id']}", params={"userId": user_id})).json()
    assert order["status"] == "PENDING"


async def test_order_status_update(client):
    user_id = await register(client, "ada")
    drill = await create_product(client, "Drill", 10.00, 5)
    order = (
        await client.post(
            f"{API}/orders", json={"userId": user_id, "cartItems": {str(drill): 1}}
        )
    ).json()

    response = await client.patch(
        f"{API}/orders/{order['id']}/status", json={"status": "SHIPPED"}
    )
    assert response.json()["status"] == "SHIPPED"

    response = await client.patch(
        f"{API}/orders/{order['id']}/status", json={"status": "TELEPORTED"}
    )
    assert response.status_code == 400


# ==================== Catalog and community ====================


@pytest.mark.parametrize(
    "path",
    [
        "/products/999",
        "/orders/999?userId=1",
        "/questions/999/vote",
    ],
)
async def test_missing_resources_return_404(client, path):
    if path.endswith("/vote"):
        response = await client.post(f"{API}{path}")
    else:
        response = await client.get(f"{API}{path}")

    assert response.status_code == 404
    assert "error" in response.json()


async def test_invalid_product_returns_400(client):
    response = await client.post(
        f"{API}/products",
        json={"name": "Drill", "description": "Cordless", "price": 0, "stockQuantity": 1},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Product price must be greater than 0"}


async def test_out_of_range_product_returns_400(client):
    response = await client.post(
        f"{API}/products",
        json={
            "name": "Drill",
            "description": "Cordless",
            "price": "123456789.00",
            "stockQuantity": 1,
        },
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Product price cannot exceed 99999999.99"}


async def test_search_and_pagination(client):
    for name in ["Hammer", "Hammer Drill", "Saw"]:
        await create_product(client, name, 5.00, 1)

    page = (
        await client.get(f"{API}/products/search", params={"name": "hammer", "size": 1})
    ).json()

    assert page["totalElements"] == 2
    assert page["totalPages"] == 2
    assert [p["name"] for p in page["items"]] == ["Hammer"]


async def test_comment_star_toggle(client):
    drill = await create_product(client, "Drill", 10.00, 5)
    comment = (
        await client.post(
            f"{API}/comments/product/{drill}",
            json={"text": "Solid", "rating": 5, "authorName": "Ada"},
        )
    ).json()

    first = await client.patch(f"{API}/comments/{comment['id']}/toggle-star")
    second = await client.patch(f"{API}/comments/{comment['id']}/toggle-star")

    assert first.json()["starred"] is True
    assert second.json()["starred"] is False


async def test_report_hides_product_question(client):
    user_id = await register(client, "ada")
    drill = await create_product(client, "Drill", 10.00, 5)
    question = (
        await client.post(
            f"{API}/questions/ask",
            json={"productId": drill, "userId": user_id, "question": "Buy cheap watches?"},
        )
    ).json()

    for _ in range(5):
        response = await client.post(f"{API}/questions/{question['id']}/report")

    assert response.json()["reportCount"] == 5
    listed = (await client.get(f"{API}/questions/product/{drill}")).json()
    assert listed["items"] == []


async def test_non_admin_answer_is_forbidden(client):
    user_id = await register(client, "ada")
    drill = await create_product(client, "Drill", 10.00, 5)
    question = (
        await client.post(
            f"{API}/general-questions/product/{drill}",
            params={"userId": user_id},
            json={"text": "Battery included?"},
        )
    ).json()

    response = await client.post(
        f"{API}/general-questions/{question['id']}/answer",
        params={"adminId": user_id},
        json={"text": "Yes"},
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Only admins can answer questions"}
