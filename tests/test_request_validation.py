import pytest


def test_rejects_non_json_body(client):
    resp = client.post(
        "/medicines", content="not-json", headers={"Content-Type": "text/plain"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid JSON")


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"price": "cheap"}, "price"),
        ({"price": -1}, "price"),
        ({"stock": 1.5}, "stock"),
        ({"name": ["a"]}, "name"),
        ({"price": "1.5"}, "price"),
        ({"stock": "10"}, "stock"),
        ({"stock": True}, "stock"),
        ({"stock": 3.0}, "stock"),
    ],
)
def test_rejects_wrongly_typed_fields(client, payload, field):
    resp = client.post("/medicines", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith(f"{field}:")
    assert len(client.get("/medicines").json()) == 3


def test_rejects_non_finite_price(client):
    for raw in (b'{"price": Infinity}', b'{"price": NaN}'):
        resp = client.post(
            "/medicines", content=raw, headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400, raw
    assert len(client.get("/medicines").json()) == 3


def test_integer_price_is_accepted(client):
    resp = client.post("/medicines", json={"name": "Whole", "price": 2, "stock": 1})
    assert resp.status_code == 201
    assert resp.json()["price"] == 2.0


def test_rejects_non_object_body(client):
    resp = client.post("/medicines", json=[{"name": "x"}])
    assert resp.status_code == 400
    assert set(resp.json()) == {"error"}


def test_update_with_malformed_body(client):
    resp = client.put("/medicines/1", json={"price": "free"})
    assert resp.status_code == 400
    assert client.get("/medicines/1").json()["price"] == 15.5


def test_update_checks_id_before_body(client):
    resp = client.put(
        "/medicines/x", content=b"garbage", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Unavailable ID"}


def test_body_size_limit(client):
    large = "a" * 1_000_001
    resp = client.post(
        "/medicines",
        content=f'{{"name":"{large}"}}',
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 413
    assert resp.json() == {"error": "Request body too large"}


def test_unknown_route_uses_error_body(client):
    resp = client.get("/pharmacists")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_wrong_method_uses_error_body(client):
    resp = client.patch("/medicines/1", json={})
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method Not Allowed"}


def test_response_headers(client):
    resp = client.get("/medicines")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Request-ID"]
