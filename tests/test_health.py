def test_live_health(client):
    resp = client.get("/health/live")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_ready_health(client):
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ready"


def test_swagger_ui_and_schema(client):
    ui = client.get("/swagger")
    assert ui.status_code == 200
    assert "text/html" in ui.headers["content-type"]

    schema = client.get("/swagger/openapi.json").json()
    assert schema["info"]["title"] == "Pharmacy API"
    assert schema["info"]["version"] == "1.0"
    assert schema["info"]["license"]["name"] == "Apache 2.0"
    by_id = schema["paths"]["/medicines/{id}"]
    assert by_id["get"]["operationId"] == "get-medicine-by-id"
    assert by_id["put"]["operationId"] == "update-medicine"
    assert by_id["delete"]["operationId"] == "delete-medicine"
    assert "requestBody" in schema["paths"]["/medicines"]["post"]


def test_swagger_index_redirects(client):
    resp = client.get("/swagger/index.html", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/swagger"


def test_importing_main_builds_no_application():
    import pharmacy.main as main

    assert not hasattr(main, "app")
    app = main.create_app(main.Settings(env="test", log_file=None))
    assert app.title == "Pharmacy API"
