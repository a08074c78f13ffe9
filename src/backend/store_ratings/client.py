# store_ratings/client.py
from __future__ import annotations
import os, typing as t
from urllib.parse import quote
import requests

BASE_URL = os.getenv("API_BASE_URL") or "http://localhost:8000"
TIMEOUT = 30


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: dict[str, str] | None = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}


class ApiSession:
    """
    One client session against the Store Ratings API.

    The bearer token lives on this object, not in module state, so two users
    can hold independent sessions in one process.
      s = ApiSession("http://localhost:8000")
      s.login("alice@x.com", "password1")
      s.create_review(store_id=1, rating=5, comment="great")
    ``http`` is anything with a requests-style ``request(method, url, ...)``.
    """

    def __init__(self, base_url: str = BASE_URL, token: str | None = None, http: t.Any = None, timeout: int = TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.user: dict | None = None
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    @property
    def authenticated(self) -> bool:
        return self.token is not None

    def _headers(self) -> dict[str, str]:
        h = {"Accept": "application/json"}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def _request(self, method: str, path: str, **kwargs) -> dict:
        r = self.http.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            timeout=self.timeout,
            **kwargs,
        )
        try:
            body = r.json()
        except ValueError:
            body = {}
        if r.status_code >= 400:
            raise ApiError(r.status_code, body.get("message") or "Request failed", body.get("errors"))
        return body

    def _remember(self, body: dict) -> dict:
        self.token = body.get("token")
        self.user = body.get("user")
        return body

    # --- auth ---
    def register(self, username: str, email: str, password: str) -> dict:
        body = self._request("POST", "/api/auth/register", json={"username": username, "email": email, "password": password})
        return self._remember(body)

    def login(self, email: str, password: str) -> dict:
        return self._remember(self._request("POST", "/api/auth/login", json={"email": email, "password": password}))

    def logout(self) -> dict:
        body = self._request("POST", "/api/auth/logout")
        self.token = None
        self.user = None
        return body

    def profile(self) -> dict:
        return self._request("GET", "/api/auth/profile")["user"]

    def update_profile(self, username: str) -> dict:
        self.user = self._request("PUT", "/api/auth/profile", json={"username": username})["user"]
        return self.user

    # --- stores ---
    def list_stores(self) -> list[dict]:
        return self._request("GET", "/api/stores")["data"]

    def get_store(self, store_id: int) -> dict:
        return self._request("GET", f"/api/stores/{store_id}")["data"]

    def search_stores(self, query: str) -> list[dict]:
        return self._request("GET", f"/api/stores/search/{quote(query, safe='')}")["data"]

    def stores_by_category(self, category: str) -> list[dict]:
        return self._request("GET", f"/api/stores/category/{quote(category, safe='')}")["data"]

    def create_store(
        self,
        name: str,
        address: str,
        category: str,
        description: str | None = None,
        image: tuple[str, bytes, str] | None = None,
    ) -> dict:
        data = {"name": name, "address": address, "category": category}
        if description is not None:
            data["description"] = description
        files = {"image": image} if image else None
        return self._request("POST", "/api/stores", data=data, files=files)["data"]

    # --- reviews ---
    def store_reviews(self, store_id: int, page: int = 1, limit: int = 10) -> dict:
        return self._request("GET", f"/api/reviews/store/{store_id}", params={"page": page, "limit": limit})

    def create_review(self, store_id: int, rating: int, comment: str | None = None) -> dict:
        payload = {"store_id": store_id, "rating": rating, "comment": comment}
        return self._request("POST", "/api/reviews", json=payload)["data"]

    def update_review(self, review_id: int, rating: int | None = None, comment: str | None = None) -> dict:
        payload = {k: v for k, v in (("rating", rating), ("comment", comment)) if v is not None}
        return self._request("PUT", f"/api/reviews/{review_id}", json=payload)["data"]

    def delete_review(self, review_id: int) -> dict:
        return self._request("DELETE", f"/api/reviews/{review_id}")
