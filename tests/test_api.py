from artify.core.security import Role

from conftest import PASSWORD, login

CARD = {
    "card_holder_name": "Carla Customer",
    "card_number": "4242424242424242",
    "card_expiry": "12/99",
    "card_cvv": "123",
}


def test_root(make_client):
    resp = make_client().get("/")
    assert resp.status_code == 200


def test_register_logs_in(make_client):
    client = make_client()
    resp = client.post("/api/auth/register", json={
        "role": "customer",
        "email": "fresh@example.com",
        "password": "longenough",
        "confirm_password": "longenough",
        "first_name": "Fresh",
        "last_name": "Customer",
    })
    assert resp.status_code == 201, resp.text

    me = client.get("/api/auth/me").json()
    assert me["email"] == "fresh@example.com"
    assert me["role"] == "customer"
    assert me["name"] == "Fresh Customer"


def test_field_errors_shape(make_client, customer):
    client = make_client()
    resp = client.post("/api/auth/login", json={"role": "customer", "email": "customer@example.com", "password": "x"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "fieldErrors": {"password": "Invalid Email or Password"}}

    resp = client.post("/api/auth/login", json={"role": "customer", "email": "not-an-email", "password": "x"})
    assert resp.status_code == 400
    assert "email" in resp.json()["fieldErrors"]


def test_logout_ends_session(make_client, customer):
    client = make_client()
    login(client, Role.customer, "customer@example.com")
    assert client.get("/api/auth/me").status_code == 200

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_role_gating(make_client, customer, editor, category):
    anonymous = make_client()
    assert anonymous.get("/posts/open").status_code == 401

    client = make_client()
    login(client, Role.editor, "editor@example.com")
    resp = client.post("/posts", json={
        "category_id": category.id, "title": "T", "description": "D", "budget": 10, "duration": 1,
    })
    assert resp.status_code == 403
    assert client.get("/admin/customers").status_code == 403


def test_categories_are_public(make_client, category):
    resp = make_client().get("/categories")
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()] == ["Fiction Editing"]
    assert make_client().get("/categories/999").json()["code"] == "NOT_FOUND"


def test_admin_endpoints(make_client, admin, customer, category):
    client = make_client()
    login(client, Role.admin, "admin@example.com")

    resp = client.post("/admin/categories", json={"name": "Proofreading", "description": "Final pass"})
    assert resp.status_code == 201

    resp = client.post("/admin/categories", json={"name": "Proofreading", "description": "Again"})
    assert resp.status_code == 409
    assert resp.json()["code"] == "CONFLICT"

    emails = [c["email"] for c in client.get("/admin/customers").json()]
    assert emails == ["customer@example.com"]


def test_engagement_lifecycle(make_client, storage, customer, editor, category):
    buyer = make_client()
    login(buyer, Role.customer, "customer@example.com", remember=True)
    seller = make_client()
    login(seller, Role.editor, "editor@example.com")

    # post and bid
    resp = buyer.post("/posts", json={
        "category_id": category.id,
        "title": "Need editing for my novel",
        "description": "80,000 words",
        "budget": 500,
        "duration": 30,
    })
    assert resp.status_code == 201, resp.text
    post = resp.json()
    assert post["status"] == "open"
    assert post["category"]["name"] == "Fiction Editing"

    assert [p["id"] for p in seller.get("/posts/open").json()] == [post["id"]]

    resp = seller.post(f"/posts/{post['id']}/bids", json={"price": 450, "comment": "Happy to help"})
    assert resp.status_code == 201
    bid = resp.json()

    resp = seller.post(f"/posts/{post['id']}/bids", json={"price": 400})
    assert resp.status_code == 409

    # approval
    resp = buyer.post(f"/posts/{post['id']}/bids/{bid['id']}/decision", json={"decision": "approve"})
    assert resp.status_code == 200, resp.text
    decision = resp.json()
    assert decision["bid"]["approved"] is True
    project_id = decision["project_id"]
    assert project_id is not None

    resp = buyer.post(f"/posts/{post['id']}/bids/{bid['id']}/decision", json={"decision": "decline"})
    assert resp.status_code == 409
    assert resp.json()["code"] == "INVALID_STATE"

    detail = buyer.get(f"/posts/{post['id']}").json()
    assert detail["status"] == "in_progress"
    assert detail["project_id"] == project_id

    # source document
    resp = buyer.post(f"/projects/{project_id}/uploads", json={"filename": "novel.docx"})
    assert resp.status_code == 201
    reservation = resp.json()
    storage.put(reservation["key"], reservation["bucket"])
    resp = buyer.post(f"/projects/{project_id}/documents", json={
        "post_id": post["id"],
        "key": reservation["key"],
        "bucket": reservation["bucket"],
        "region": reservation["region"],
        "name": "Manuscript",
    })
    assert resp.status_code == 201, resp.text
    assert resp.json()["type"] == "SOURCE"
    assert len(seller.get(f"/projects/{project_id}/documents", params={"type": "SOURCE"}).json()) == 1

    # payment before completion is rejected
    resp = buyer.post(f"/projects/{project_id}/payment", json={"amount": 450, **CARD})
    assert resp.status_code == 409

    resp = seller.post(f"/projects/{project_id}/complete")
    assert resp.status_code == 200
    assert resp.json()["status"] == "payment_pending"

    resp = buyer.post(f"/projects/{project_id}/payment", json={"amount": 450, "card_number": "1"})
    assert resp.status_code == 400
    assert {"card_number", "card_holder_name"} <= set(resp.json()["fieldErrors"])

    resp = buyer.post(f"/projects/{project_id}/payment", json={"amount": 450, **CARD})
    assert resp.status_code == 201, resp.text
    assert resp.json()["amount"] == 450

    resp = buyer.post(f"/projects/{project_id}/payment", json={"amount": 450, **CARD})
    assert resp.status_code == 409
    assert resp.json()["code"] == "CONFLICT"

    project = buyer.get(f"/projects/{project_id}").json()
    assert project["status"] == "completed"
    assert project["agreed_price"] == 450
    assert project["payment"]["payment_method"] == "CREDIT_CARD"
    assert project["has_feedback"] is False
    assert buyer.get(f"/posts/{post['id']}").json()["status"] == "completed"

    # feedback
    resp = buyer.post(f"/projects/{project_id}/feedback", json={"rating": 5, "comment": "Great work"})
    assert resp.status_code == 201
    resp = buyer.post(f"/projects/{project_id}/feedback", json={"rating": 4, "comment": "Again"})
    assert resp.status_code == 409

    resp = buyer.post(f"/projects/{project_id}/feedback", json={"rating": 9, "comment": "Out of range"})
    assert resp.status_code == 400
    assert "rating" in resp.json()["fieldErrors"]

    assert buyer.get(f"/projects/{project_id}").json()["has_feedback"] is True
    assert len(seller.get(f"/projects/{project_id}/feedback").json()) == 1


def test_outsider_cannot_see_project(make_client, make_principal, customer, editor, category, db):
    from artify.services import posts

    post = posts.create_post(db, customer, category.id, "Title", "Description", 100, 3)
    bid = posts.submit_bid(db, editor, post.id, 90)
    _, project = posts.decide_bid(db, customer, post.id, bid.id, "approve")
    project_id = project.id

    make_principal(Role.customer, "outsider@example.com")
    client = make_client()
    login(client, Role.customer, "outsider@example.com", PASSWORD)

    resp = client.get(f"/projects/{project_id}")
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "code": "NOT_PERMITTED", "message": "Not permitted", "details": None}


def test_non_finite_numbers_are_field_errors(make_client, db, customer, editor, category):
    buyer = make_client()
    login(buyer, Role.customer, "customer@example.com")
    seller = make_client()
    login(seller, Role.editor, "editor@example.com")
    headers = {"Content-Type": "application/json"}

    # bare NaN / Infinity tokens are accepted by the JSON parser
    resp = buyer.post(
        "/posts",
        content=f'{{"category_id": {category.id}, "title": "T", "description": "D", "budget": NaN, "duration": 3}}',
        headers=headers,
    )
    assert resp.status_code == 400
    assert "budget" in resp.json()["fieldErrors"]

    post_id = buyer.post("/posts", json={
        "category_id": category.id, "title": "T", "description": "D", "budget": 100, "duration": 3,
    }).json()["id"]
    resp = seller.post(f"/posts/{post_id}/bids", content='{"price": Infinity}', headers=headers)
    assert resp.status_code == 400
    assert "price" in resp.json()["fieldErrors"]
    assert seller.get(f"/posts/{post_id}").json()["bids"] == []

    bid_id = seller.post(f"/posts/{post_id}/bids", json={"price": 90}).json()["id"]
    project_id = buyer.post(
        f"/posts/{post_id}/bids/{bid_id}/decision", json={"decision": "approve"},
    ).json()["project_id"]
    seller.post(f"/projects/{project_id}/complete")

    resp = buyer.post(
        f"/projects/{project_id}/payment",
        content='{"amount": NaN, "payment_method": "WALLET"}',
        headers=headers,
    )
    assert resp.status_code == 400
    assert "amount" in resp.json()["fieldErrors"]
    assert buyer.get(f"/projects/{project_id}").json()["payment"] is None
