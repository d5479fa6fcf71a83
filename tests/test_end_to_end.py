from fastapi import status

from conftest import login, register


def test_register_login_and_manage_a_contact(client):
    assert register(client).status_code == status.HTTP_201_CREATED
    headers = login(client)

    contact = client.post(
        "/api/contacts", json={"contact_number": "9123456789"}, headers=headers
    ).json()
    address = client.post(
        f"/api/contacts/{contact['id']}/addresses",
        json={"address_line1": "1 Main St", "city": "Pune", "state": "MH", "pincode": "411001"},
        headers=headers,
    ).json()
    client.post(
        "/api/tasks",
        json={"contact_id": contact["id"], "title": "Call", "status": "pending"},
        headers=headers,
    )

    tasks = client.get("/api/tasks", headers=headers).json()
    assert len(tasks) == 1
    assert tasks[0]["title"] == "Call"
    assert tasks[0]["status"] == "pending"

    addresses = client.get(f"/api/contacts/{contact['id']}/addresses", headers=headers).json()
    assert addresses == [address]
    assert addresses[0]["country"] == "India"
