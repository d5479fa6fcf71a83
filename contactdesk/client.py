"""
Python client for the ContactDesk REST API.

The client logs in, keeps the token in a :class:`SessionStore` and attaches
it to every protected call. When the local session has run out, or the
server answers 401, the session is dropped and :class:`SessionExpired` is
raised so the caller can send the user back to the login step.
"""

from typing import Any

import httpx

from .session import SessionStore


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status_code: int, message: str, errors: list | None = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class SessionExpired(ApiError):
    """No usable session: expired locally or rejected by the server."""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(401, message)


class ContactDeskClient:
    """
    Thin wrapper around the REST endpoints.

    Args:
        base_url: Root URL of the API, e.g. ``"http://localhost:8000"``.
        http: Preconfigured ``httpx.Client``; one is created when omitted.
        store: Session store; a fresh one with the default lifetime when
            omitted.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: httpx.Client | None = None,
        store: SessionStore | None = None,
        timeout: float = 10.0,
    ):
        self.http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self.store = store or SessionStore()

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "ContactDeskClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- plumbing ---

    def _request(self, method: str, path: str, auth: bool = True, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if auth:
            session = self.store.current
            if session is None:
                raise SessionExpired()
            headers["Authorization"] = f"Bearer {session.token}"

        response = self.http.request(method, path, headers=headers, **kwargs)

        if response.status_code == 401 and auth:
            self.store.clear()
            raise SessionExpired(self._error_message(response))
        if response.is_error:
            body = self._json(response)
            raise ApiError(
                response.status_code,
                self._error_message(response),
                body.get("errors") if isinstance(body, dict) else None,
            )
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {}

    def _error_message(self, response: httpx.Response) -> str:
        body = self._json(response)
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.reason_phrase

    # --- auth ---

    def register(
        self, first_name: str, last_name: str, email: str, phone: str, password: str
    ) -> int:
        """Create an account and return its id."""
        data = self._request(
            "POST",
            "/api/auth/register",
            auth=False,
            json={
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "phone": phone,
                "password": password,
            },
        )
        return data["user_id"]

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and start a local session. Returns the public user fields."""
        data = self._request(
            "POST",
            "/api/auth/login",
            auth=False,
            json={"email": email, "password": password},
        )
        self.store.start(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        self.store.clear()

    @property
    def logged_in(self) -> bool:
        return self.store.current is not None

    def countdown(self) -> str:
        """Time left in the local session as ``m:ss``."""
        return self.store.countdown()

    # --- users ---

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/api/users/me")

    def rename(self, first_name: str, last_name: str) -> dict[str, Any]:
        return self._request(
            "PUT",
            "/api/users/me",
            json={"first_name": first_name, "last_name": last_name},
        )

    def delete_account(self) -> None:
        self._request("DELETE", "/api/users/me")
        self.store.clear()

    # --- contacts ---

    def list_contacts(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/contacts")

    def get_contact(self, contact_id: int) -> dict[str, Any]:
        return self._request("GET", f"/api/contacts/{contact_id}")

    def create_contact(self, **fields) -> dict[str, Any]:
        return self._request("POST", "/api/contacts", json=fields)

    def update_contact(self, contact_id: int, **fields) -> dict[str, Any]:
        return self._request("PUT", f"/api/contacts/{contact_id}", json=fields)

    def delete_contact(self, contact_id: int) -> None:
        self._request("DELETE", f"/api/contacts/{contact_id}")

    # --- addresses ---

    def list_addresses(self, contact_id: int) -> list[dict[str, Any]]:
        return self._request("GET", f"/api/contacts/{contact_id}/addresses")

    def create_address(self, contact_id: int, **fields) -> dict[str, Any]:
        return self._request(
            "POST", f"/api/contacts/{contact_id}/addresses", json=fields
        )

    def update_address(
        self, contact_id: int, address_id: int, **fields
    ) -> dict[str, Any]:
        return self._request(
            "PUT", f"/api/contacts/{contact_id}/addresses/{address_id}", json=fields
        )

    def delete_address(self, contact_id: int, address_id: int) -> None:
        self._request("DELETE", f"/api/contacts/{contact_id}/addresses/{address_id}")

    # --- tasks ---

    def list_tasks(self, status: str | None = None) -> list[dict[str, Any]]:
        params = {"status": status} if status else None
        return self._request("GET", "/api/tasks", params=params)

    def get_task(self, task_id: int) -> dict[str, Any]:
        return self._request("GET", f"/api/tasks/{task_id}")

    def create_task(self, **fields) -> dict[str, Any]:
        return self._request("POST", "/api/tasks", json=fields)

    def update_task(self, task_id: int, **fields) -> dict[str, Any]:
        return self._request("PUT", f"/api/tasks/{task_id}", json=fields)

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")
