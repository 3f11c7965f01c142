import pytest

from shopfront.shopify.errors import UpstreamError


def test_list_products(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json["count"] == 1
    product = r.json["items"][0]
    assert product["handle"] == "gift-box"
    assert product["variants"][0]["selected_options"] == [{"name": "Size", "value": "Small"}]


def test_list_products_limit(client):
    assert client.get("/api/products?limit=abc").status_code == 400
    assert client.get("/api/products?limit=0").status_code == 400
    assert client.get("/api/products?limit=1000").status_code == 200


def test_product_by_handle(client):
    r = client.get("/api/products/gift-box")
    assert r.status_code == 200
    assert r.json["name"] == "Gift Box"
    assert len(r.json["variants"]) == 3

    assert client.get("/api/products/nope").status_code == 404


def test_shop(client):
    r = client.get("/api/shop")
    assert r.status_code == 200
    assert r.json["name"] == "Boxed Goods"


def test_shop_falls_back_to_store_name(client, broken_upstream):
    r = client.get("/api/shop")
    assert r.status_code == 200
    assert r.json["name"] == "Test Store"


def test_upstream_failure_envelope(client, broken_upstream):
    r = client.get("/api/products", headers={"X-Request-ID": "rid-9"})
    assert r.status_code == 500
    assert r.json == {
        "error": "Could not reach the store. Please try again.",
        "code": "upstream_error",
        "request_id": "rid-9",
    }


CONTACT = {"name": "Ann", "email": "ann@example.com", "subject": "Hello", "message": "Do you ship abroad?"}


def test_contact(client):
    r = client.post("/api/contact", json=CONTACT)
    assert r.status_code == 200
    assert r.json == {"ok": True}


@pytest.mark.parametrize(
    "body, error",
    [
        (dict(CONTACT, message="   "), "Missing required fields."),
        ({k: v for k, v in CONTACT.items() if k != "subject"}, "Missing required fields."),
        (dict(CONTACT, email="ann"), "Invalid email."),
    ],
)
def test_contact_validation(client, body, error):
    r = client.post("/api/contact", json=body)
    assert r.status_code == 400
    assert r.json["error"] == error


def test_contact_rejects_non_object(client):
    assert client.post("/api/contact", json=["not", "an", "object"]).status_code == 400


def test_upstream_error_on_page_renders_html(client, fake):
    def fail(*args, **kwargs):
        raise UpstreamError("Could not reach the store. Please try again.")

    fake.get_product_by_handle = fail
    r = client.get("/products/gift-box")
    assert r.status_code == 500
    assert b"Could not reach the store" in r.data


def test_product_by_listing_position(client):
    r = client.get("/api/products/1")
    assert r.status_code == 200
    assert r.json["handle"] == "gift-box"

    assert client.get("/api/products/2").status_code == 404
    assert client.get("/api/products/0").status_code == 404


def test_product_by_global_id(client):
    r = client.get("/api/products/gid://shopify/Product/10")
    assert r.status_code == 200
    assert r.json["numeric_id"] == 1

    assert client.get("/api/products/gid://shopify/Product/99").status_code == 404
