from fastapi import status

from contactdesk import models


def create_contact(client, headers, number="9123456789", **extra):
    payload = {"contact_number": number, **extra}
    return client.post("/api/contacts", json=payload, headers=headers)


def test_create_and_list_contacts(client, user_a):
    create_resp = create_contact(
        client, user_a, contact_email="ravi@example.com", note="Supplier"
    )
    assert create_resp.status_code == status.HTTP_201_CREATED
    created = create_resp.json()
    assert created["contact_number"] == "9123456789"
    assert created["contact_email"] == "ravi@example.com"

    list_resp = client.get("/api/contacts", headers=user_a)
    assert list_resp.status_code == status.HTTP_200_OK
    assert [c["id"] for c in list_resp.json()] == [created["id"]]


def test_contacts_listed_newest_first(client, user_a):
    first = create_contact(client, user_a, "9000000011").json()
    second = create_contact(client, user_a, "9000000012").json()
    ids = [c["id"] for c in client.get("/api/contacts", headers=user_a).json()]
    assert ids == [second["id"], first["id"]]


def test_duplicate_contact_number_conflicts(client, user_a):
    create_contact(client, user_a)
    response = create_contact(client, user_a)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"error": "Contact number already exists for this user"}


def test_same_number_allowed_for_different_users(client, user_a, user_b):
    assert create_contact(client, user_a).status_code == status.HTTP_201_CREATED
    assert create_contact(client, user_b).status_code == status.HTTP_201_CREATED


def test_contact_requires_number_and_valid_email(client, user_a):
    response = client.post(
        "/api/contacts",
        json={"contact_number": "  ", "contact_email": "nope"},
        headers=user_a,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"contact_number", "contact_email"}


def test_get_update_delete_own_contact(client, user_a):
    contact = create_contact(client, user_a, note="old").json()
    url = f"/api/contacts/{contact['id']}"

    assert client.get(url, headers=user_a).json()["note"] == "old"

    updated = client.put(
        url, json={"contact_number": "9111111111", "note": "new"}, headers=user_a
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["contact_number"] == "9111111111"
    assert updated.json()["note"] == "new"

    deleted = client.delete(url, headers=user_a)
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json() == {"message": "Contact deleted successfully"}
    assert client.get("/api/contacts", headers=user_a).json() == []


def test_update_to_existing_number_conflicts(client, user_a):
    create_contact(client, user_a, "9000000011")
    other = create_contact(client, user_a, "9000000012").json()
    response = client.put(
        f"/api/contacts/{other['id']}",
        json={"contact_number": "9000000011"},
        headers=user_a,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_keeping_own_number_is_allowed(client, user_a):
    contact = create_contact(client, user_a).json()
    response = client.put(
        f"/api/contacts/{contact['id']}",
        json={"contact_number": contact["contact_number"], "note": "same number"},
        headers=user_a,
    )
    assert response.status_code == status.HTTP_200_OK


def test_other_users_contact_is_forbidden(client, user_a, user_b):
    contact = create_contact(client, user_a).json()
    url = f"/api/contacts/{contact['id']}"
    expected = {"error": "Contact does not belong to this user"}

    for response in (
        client.get(url, headers=user_b),
        client.put(url, json={"contact_number": "9000000000"}, headers=user_b),
        client.delete(url, headers=user_b),
    ):
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == expected

    assert client.get(url, headers=user_a).status_code == status.HTTP_200_OK


def test_missing_contact_is_forbidden_not_404(client, user_a):
    for response in (
        client.get("/api/contacts/9999", headers=user_a),
        client.put(
            "/api/contacts/9999", json={"contact_number": "9000000000"}, headers=user_a
        ),
        client.delete("/api/contacts/9999", headers=user_a),
    ):
        assert response.status_code == status.HTTP_403_FORBIDDEN


def test_contact_records_its_author(client, user_a, db_session):
    me = client.get("/api/users/me", headers=user_a).json()["id"]
    contact = client.post(
        "/api/contacts", json={"contact_number": "9123456789"}, headers=user_a
    ).json()
    client.put(
        f"/api/contacts/{contact['id']}",
        json={"contact_number": "9123456780"},
        headers=user_a,
    )
    stored = db_session.get(models.Contact, contact["id"])
    assert (stored.created_by, stored.updated_by) == (me, me)
