"""
Tests for reporting API endpoints.
"""

from decimal import Decimal

USER = {"X-User-Id": "manager-1"}


def stocked_product(client, name="Coffee", quantity=50):
    product_id = client.post("/products", json={
        "name": name,
        "category": "Drinks",
        "unit_type": "COUNTABLE",
        "price_per_unit": "10.00",
    }).json()["id"]
    client.post("/stock/stock-in", headers=USER, json={
        "product_id": product_id, "quantity": quantity,
    })
    return product_id


def test_stock_report(client):
    stocked_product(client, name="Tea", quantity=3)
    stocked_product(client, name="Coffee", quantity=7)

    rows = client.get("/reports/stock").json()

    assert [r["name"] for r in rows] == ["Coffee", "Tea"]
    assert Decimal(rows[0]["quantity"]) == Decimal("7")


def test_sales_report_defaults_to_daily(client):
    product_id = stocked_product(client)
    client.post("/sales", headers=USER, json={
        "product_id": product_id, "quantity": 2, "unit_price": "3.00",
    })

    data = client.get("/reports/sales").json()

    assert data["period"] == "daily"
    assert len(data["entries"]) == 1
    assert data["entries"][0]["product_name"] == "Coffee"
    assert data["entries"][0]["user_id"] == "manager-1"
    assert Decimal(data["total_revenue"]) == Decimal("6.00")


def test_revenue_report(client):
    product_id = stocked_product(client)
    for quantity in (20, 1):
        client.post("/sales", headers=USER, json={
            "product_id": product_id, "quantity": quantity, "unit_price": "12.00",
        })

    data = client.get("/reports/revenue", params={"period": "weekly"}).json()

    assert len(data["by_day"]) == 1
    assert Decimal(data["by_day"][0]["daily_revenue"]) == Decimal("252.00")
    assert data["by_day"][0]["total_sales"] == 2
    assert Decimal(data["total_revenue"]) == Decimal("252.00")
    assert data["total_sales"] == 2


def test_unknown_period_returns_422(client):
    assert client.get("/reports/sales", params={"period": "yearly"}).status_code == 422
