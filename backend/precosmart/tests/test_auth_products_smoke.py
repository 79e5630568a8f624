from precosmart.tests.conftest import register


def test_register_login_and_session(client):
    headers = register(client, "maria@example.com", name="Maria")

    r = client.post("/auth/login", json={"email": "maria@example.com", "password": "secret123"})
    assert r.status_code == 200
    tokens = r.json()
    assert "access_token" in tokens

    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == "maria@example.com"
    assert r.json()["memberships"] == []

    r = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 200

    r = client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert r.status_code == 401


def test_wrong_password_is_rejected(client):
    register(client, "joao@example.com")
    r = client.post("/auth/login", json={"email": "joao@example.com", "password": "nope"})
    assert r.status_code == 401


def test_password_reset_flow(client):
    register(client, "ana@example.com")
    r = client.post("/auth/password-reset", json={"email": "ana@example.com"})
    assert r.status_code == 200
    token = r.json()["reset_token"]

    r = client.post("/auth/password-reset/confirm", json={"token": token, "new_password": "novasenha"})
    assert r.status_code == 200
    r = client.post("/auth/login", json={"email": "ana@example.com", "password": "novasenha"})
    assert r.status_code == 200

    r = client.post("/auth/password-reset", json={"email": "ghost@example.com"})
    assert r.status_code == 200
    assert r.json()["reset_token"] is None


def test_resolve_walks_user_through_organization_setup(client):
    r = client.get("/session/resolve", params={"route": "/produtos"})
    assert r.json()["action"] == "redirect"
    assert r.json()["route"] == "/auth/login"

    headers = register(client, "dono@example.com")
    r = client.get("/session/resolve", params={"route": "/produtos"}, headers=headers)
    assert r.json()["route"] == "/empresas/nova"

    r = client.post("/organizations/", json={"name": "Doceria", "tax_id": "12.345.678/0001-90"}, headers=headers)
    assert r.status_code == 200
    org_id = r.json()["id"]
    assert r.json()["role"] == "admin"

    # A single membership is selected without visiting the selection page
    r = client.get("/session/resolve", params={"route": "/produtos"}, headers=headers)
    body = r.json()
    assert body["action"] == "render"
    assert body["route"] == "/produtos"
    assert body["active_organization"]["id"] == org_id

    r = client.post("/organizations/", json={"name": "Confeitaria"}, headers=headers)
    second_id = r.json()["id"]

    r = client.get("/session/resolve", params={"route": "/produtos"}, headers={**headers, "X-Organization-ID": "999"})
    assert r.json()["route"] == "/empresas/selecionar"
    assert r.json()["active_organization"] is None

    r = client.get(
        "/session/resolve",
        params={"route": "/produtos"},
        headers={**headers, "X-Organization-ID": str(second_id)},
    )
    assert r.json()["action"] == "render"
    assert r.json()["active_organization"]["name"] == "Confeitaria"


def test_other_organization_is_forbidden(client, signed_in):
    outsider = register(client, "outsider@example.com")
    r = client.post("/organizations/", json={"name": "Alheia"}, headers=outsider)
    foreign_id = r.json()["id"]

    r = client.get("/items/", headers={**signed_in, "X-Organization-ID": str(foreign_id)})
    assert r.status_code == 403
    r = client.post(f"/organizations/{foreign_id}/select", headers=signed_in)
    assert r.status_code == 403
    r = client.get("/items/", headers={"Authorization": signed_in["Authorization"]})
    assert r.status_code == 400


def test_admin_invites_member(client, signed_in):
    member = register(client, "ajudante@example.com")
    r = client.post("/organizations/members", json={"email": "ajudante@example.com"}, headers=signed_in)
    assert r.status_code == 200
    assert r.json()["role"] == "member"

    r = client.get("/organizations/", headers=member)
    assert [o["name"] for o in r.json()] == ["Padaria"]

    member_headers = {**member, "X-Organization-ID": signed_in["X-Organization-ID"]}
    r = client.post("/organizations/members", json={"email": "owner@example.com"}, headers=member_headers)
    assert r.status_code == 403


def test_item_discount_validation_happens_before_write(client, signed_in):
    r = client.post(
        "/items/",
        json={"name": "Chocolate", "unit": "kg", "price": "10.00", "discounted_price": "12.00"},
        headers=signed_in,
    )
    assert r.status_code == 422
    r = client.get("/items/", headers=signed_in)
    assert r.json() == []


def test_item_lifecycle_and_price_history(client, signed_in):
    r = client.post("/item-categories/", json={"name": "Laticínios"}, headers=signed_in)
    category_id = r.json()["id"]

    payload = {"name": "Manteiga", "unit": "g", "price": "40.00", "category_id": category_id}
    r = client.post("/items/", json=payload, headers=signed_in)
    assert r.status_code == 200, r.text
    item = r.json()
    assert item["category"]["name"] == "Laticínios"

    r = client.put(f"/items/{item['id']}", json={**payload, "price": "44.00"}, headers=signed_in)
    assert r.status_code == 200
    r = client.put(f"/items/{item['id']}", json={**payload, "price": "44.00"}, headers=signed_in)
    assert r.status_code == 200

    r = client.get(f"/items/{item['id']}/price-history", headers=signed_in)
    history = r.json()
    assert len(history) == 1
    assert float(history[0]["old_price"]) == 40.0
    assert float(history[0]["new_price"]) == 44.0

    r = client.delete(f"/items/{item['id']}", headers=signed_in)
    assert r.json()["active"] is False
    r = client.get("/items/", headers=signed_in)
    assert r.json() == []


def test_product_cost_and_margin_through_api(client, signed_in):
    flour = client.post("/items/", json={"name": "Farinha", "unit": "g", "price": "20.00"}, headers=signed_in).json()
    box = client.post("/items/", json={"name": "Caixa", "unit": "unidade", "price": "5.00"}, headers=signed_in).json()

    # Derived fields sent by the client are ignored
    r = client.post(
        "/products/",
        json={"name": "Bolo", "sale_price": "30.00", "total_cost": "999", "margin": "99"},
        headers=signed_in,
    )
    assert r.status_code == 200
    product = r.json()
    assert float(product["total_cost"]) == 0
    assert float(product["margin"]) == 0

    pid = product["id"]
    r = client.post(f"/products/{pid}/lines", json={"item_id": flour["id"], "quantity": 500}, headers=signed_in)
    assert r.status_code == 200, r.text
    flour_line = r.json()
    assert float(flour_line["cost"]) == 10.0
    assert flour_line["item"]["name"] == "Farinha"

    client.post(f"/products/{pid}/lines", json={"item_id": box["id"], "quantity": 1}, headers=signed_in)
    r = client.get(f"/products/{pid}", headers=signed_in)
    detail = r.json()
    assert float(detail["total_cost"]) == 15.0
    assert float(detail["margin"]) == 50.0
    assert detail["low_margin"] is False
    assert len(detail["lines"]) == 2

    r = client.put(f"/products/{pid}/lines/{flour_line['id']}", json={"quantity": 1000}, headers=signed_in)
    assert float(r.json()["cost"]) == 20.0
    detail = client.get(f"/products/{pid}", headers=signed_in).json()
    assert float(detail["total_cost"]) == 25.0
    assert detail["low_margin"] is True

    r = client.put(f"/products/{pid}", json={"name": "Bolo", "sale_price": "50.00"}, headers=signed_in)
    assert float(r.json()["margin"]) == 50.0
    r = client.get(f"/products/{pid}/price-history", headers=signed_in)
    assert len(r.json()) == 1

    r = client.delete(f"/products/{pid}/lines/{flour_line['id']}", headers=signed_in)
    assert float(r.json()["total_cost"]) == 5.0
    assert len(r.json()["lines"]) == 1

    r = client.put(f"/products/{pid}/lines/{flour_line['id']}", json={"quantity": 3}, headers=signed_in)
    assert r.status_code == 404

    r = client.post(f"/products/{pid}/lines", json={"item_id": box["id"], "quantity": 0}, headers=signed_in)
    assert r.status_code == 422


def test_item_in_use_keeps_its_unit_family(client, signed_in):
    payload = {"name": "Farinha", "unit": "g", "price": "20.00"}
    flour = client.post("/items/", json=payload, headers=signed_in).json()
    pid = client.post("/products/", json={"name": "Bolo", "sale_price": "30.00"}, headers=signed_in).json()["id"]
    line = client.post(
        f"/products/{pid}/lines", json={"item_id": flour["id"], "quantity": 500}, headers=signed_in
    ).json()

    r = client.put(f"/items/{flour['id']}", json={**payload, "unit": "unidade", "price": "200.00"}, headers=signed_in)
    assert r.status_code == 400
    assert client.get(f"/items/{flour['id']}", headers=signed_in).json()["unit"] == "g"

    r = client.put(f"/products/{pid}/lines/{line['id']}", json={"quantity": "600"}, headers=signed_in)
    assert r.status_code == 200, r.text
    assert float(r.json()["cost"]) == 12.0

    # Same family is still allowed
    r = client.put(f"/items/{flour['id']}", json={**payload, "unit": "kg"}, headers=signed_in)
    assert r.status_code == 200
    assert r.json()["unit"] == "kg"


def test_unused_item_can_switch_unit_family(client, signed_in):
    payload = {"name": "Ovos", "unit": "g", "price": "20.00"}
    eggs = client.post("/items/", json=payload, headers=signed_in).json()
    r = client.put(f"/items/{eggs['id']}", json={**payload, "unit": "unidade", "price": "1.00"}, headers=signed_in)
    assert r.status_code == 200
    assert r.json()["unit"] == "unidade"


def test_category_rename_to_existing_name_is_rejected(client, signed_in):
    client.post("/item-categories/", json={"name": "Secos"}, headers=signed_in)
    other = client.post("/item-categories/", json={"name": "Frios"}, headers=signed_in).json()

    r = client.put(f"/item-categories/{other['id']}", json={"name": "Secos"}, headers=signed_in)
    assert r.status_code == 400
    names = [c["name"] for c in client.get("/item-categories/", headers=signed_in).json()]
    assert names == ["Frios", "Secos"]

    r = client.put(f"/item-categories/{other['id']}", json={"name": "Frios", "description": "Geladeira"}, headers=signed_in)
    assert r.status_code == 200
    assert r.json()["description"] == "Geladeira"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["database"] is True
