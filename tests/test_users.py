from fastapi import status
from sqlalchemy import func, select

from contactdesk import models
from conftest import login, register


def count(db_session, model):
    return db_session.scalar(select(func.count()).select_from(model))


def test_read_me(client, user_a):
    response = client.get("/api/users/me", headers=user_a)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["first_name"] == "Asha"
    assert data["last_name"] == "Rao"
    assert data["full_name"] == "Asha Rao"
    assert data["phone"] == "9000000001"
    assert "hashed_password" not in data


def test_rename_recomputes_full_name(client, user_a):
    response = client.put(
        "/api/users/me", json={"first_name": "Asha", "last_name": "Kulkarni"}, headers=user_a
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["full_name"] == "Asha Kulkarni"
    assert client.get("/api/users/me", headers=user_a).json()["last_name"] == "Kulkarni"


def test_rename_requires_both_names(client, user_a):
    response = client.put("/api/users/me", json={"first_name": "Asha"}, headers=user_a)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["field"] == "last_name"


def test_rename_cannot_touch_other_fields(client, user_a):
    response = client.put(
        "/api/users/me",
        json={"first_name": "A", "last_name": "B", "email": "evil@x.com"},
        headers=user_a,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_user_cascades_to_owned_rows(client, db_session):
    register(client)
    headers = login(client)
    contact = client.post(
        "/api/contacts", json={"contact_number": "9123456789"}, headers=headers
    ).json()
    client.post(
        f"/api/contacts/{contact['id']}/addresses",
        json={"address_line1": "1 Main St", "city": "Pune", "state": "MH", "pincode": "411001"},
        headers=headers,
    )
    client.post("/api/tasks", json={"contact_id": contact["id"], "title": "Call"}, headers=headers)

    # a second user's data must survive
    register(client, email="b@x.com", phone="9000000002")
    other = login(client, email="b@x.com")
    client.post("/api/contacts", json={"contact_number": "9000000077"}, headers=other)

    response = client.delete("/api/users/me", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "User deleted successfully"}

    assert count(db_session, models.User) == 1
    assert count(db_session, models.Contact) == 1
    assert count(db_session, models.Address) == 0
    assert count(db_session, models.Task) == 0


def test_token_of_deleted_user_is_rejected(client, user_a):
    client.delete("/api/users/me", headers=user_a)
    response = client.get("/api/contacts", headers=user_a)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
