"""
Tests for the admin shoutout code endpoints.
"""


def _create(client, admin_headers, **body):
    payload = {"label": "Main banner", "code": "<a href='https://example.com'>My story</a>"}
    payload.update(body)
    return client.post("/shoutouts", json=payload, headers=admin_headers)


def test_create_and_list_scoped_codes(client, admin_headers):
    assert _create(client, admin_headers, label="Global").status_code == 201
    assert _create(client, admin_headers, label="For S1", storyId="S1").status_code == 201
    assert _create(client, admin_headers, label="For S2", storyId="S2").status_code == 201

    resp = client.get("/shoutouts?storyId=S1", headers=admin_headers)
    assert resp.status_code == 200
    assert [c["label"] for c in resp.get_json()] == ["Global", "For S1"]

    everything = client.get("/shoutouts", headers=admin_headers).get_json()
    assert len(everything) == 3


def test_update_existing_code(client, admin_headers):
    code_id = _create(client, admin_headers).get_json()["id"]

    resp = _create(client, admin_headers, id=code_id, label="Renamed")
    assert resp.status_code == 200
    assert resp.get_json()["label"] == "Renamed"


def test_update_unknown_code_is_404(client, admin_headers):
    assert _create(client, admin_headers, id=404).status_code == 404


def test_label_and_code_required(client, admin_headers):
    assert _create(client, admin_headers, label="").status_code == 400
    assert _create(client, admin_headers, code="   ").status_code == 400


def test_cap_on_number_of_codes(app, client, admin_headers):
    limit = app.extensions["scheduler_settings"].shoutout_codes_max
    for i in range(limit):
        assert _create(client, admin_headers, label=f"Code {i}").status_code == 201

    resp = _create(client, admin_headers, label="One too many")
    assert resp.status_code == 409
    assert resp.get_json()["kind"] == "conflict"


def test_delete_code(client, admin_headers):
    code_id = _create(client, admin_headers).get_json()["id"]

    assert client.delete(f"/shoutouts?id={code_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/shoutouts?id={code_id}", headers=admin_headers).status_code == 404


def test_codes_are_admin_only(client):
    assert client.get("/shoutouts").status_code == 401
    assert client.post("/shoutouts", json={"label": "x", "code": "y"}).status_code == 401


def test_boolean_id_is_rejected(client, admin_headers):
    _create(client, admin_headers)
    assert _create(client, admin_headers, id=True, label="Hijack").status_code == 400
    assert client.delete("/shoutouts?id=", headers=admin_headers).status_code == 400
