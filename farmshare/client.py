"""HTTP client and UI-facing application state for the FarmShare API.

``AppState`` replaces page-level globals with one object that owns the
logged-in farmer, the cached catalog and the cached bookings. Every
successful booking mutation refetches both caches.
"""

import logging

import requests

from farmshare.seed import sample_catalog
from farmshare.services.dashboard_service import DashboardService
from farmshare.services.pricing import calculate_cost

logger = logging.getLogger(__name__)


class ClientError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FarmShareClient:
    def __init__(self, base_url, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        try:
            data = response.json()
        except ValueError:
            data = None
        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            raise ClientError(message or f"Request failed with status {response.status_code}.", response.status_code)
        return data

    def login(self, name, phone):
        return self._request("POST", "/farmers/login", json={"name": name, "phone": phone})

    def list_equipment(self, category=None, status=None):
        params = {key: value for key, value in (("category", category), ("status", status)) if value}
        return self._request("GET", "/equipment", params=params)

    def create_booking(self, equipment_id, farmer_id, start_date, end_date, location):
        payload = {
            "equipment_id": equipment_id,
            "farmer_id": farmer_id,
            "start_date": str(start_date),
            "end_date": str(end_date),
            "location": location,
        }
        return self._request("POST", "/bookings", json=payload)

    def farmer_bookings(self, farmer_id):
        return self._request("GET", f"/bookings/farmer/{farmer_id}")

    def farmer_summary(self, farmer_id):
        return self._request("GET", f"/bookings/farmer/{farmer_id}/summary")

    def cancel_booking(self, booking_id):
        return self._request("PUT", f"/bookings/{booking_id}/cancel")

    def complete_booking(self, booking_id):
        return self._request("PUT", f"/bookings/{booking_id}/complete")


class AppState:
    def __init__(self, client):
        self.client = client
        self.current_farmer = None
        self.equipment = []
        self.bookings = []
        self.offline = False

    @property
    def is_logged_in(self):
        return self.current_farmer is not None

    def login(self, name, phone):
        data = self.client.login(name, phone)
        self.current_farmer = data["farmer"]
        self.refresh_bookings()
        return self.current_farmer

    def logout(self):
        self.current_farmer = None
        self.bookings = []

    def refresh_catalog(self, category=None, status=None):
        try:
            self.equipment = self.client.list_equipment(category=category, status=status)
            self.offline = False
        except requests.RequestException as exc:
            logger.warning("Catalog fetch failed, showing sample equipment: %s", exc)
            self.equipment = sample_catalog()
            self.offline = True
        return self.equipment

    def filter_catalog(self, category="all", search=""):
        items = self.equipment
        if category and category != "all":
            items = [item for item in items if item["category"] == category]
        term = (search or "").strip().lower()
        if term:
            items = [
                item
                for item in items
                if term in item["name"].lower() or term in (item.get("description") or "").lower()
            ]
        return items

    def refresh_bookings(self):
        if not self.is_logged_in:
            self.bookings = []
            return self.bookings
        self.bookings = self.client.farmer_bookings(self.current_farmer["id"])
        return self.bookings

    def find_equipment(self, equipment_id):
        return next((item for item in self.equipment if item["id"] == equipment_id), None)

    def preview_cost(self, equipment_id, start_date, end_date):
        item = self.find_equipment(equipment_id)
        if item is None:
            raise ClientError("Unknown equipment.")
        return calculate_cost(start_date, end_date, item["price_per_day"])

    def book(self, equipment_id, start_date, end_date, location):
        self._require_login()
        result = self.client.create_booking(
            equipment_id,
            self.current_farmer["id"],
            start_date,
            end_date,
            location,
        )
        self._after_mutation()
        return result

    def cancel(self, booking_id):
        self._require_login()
        result = self.client.cancel_booking(booking_id)
        self._after_mutation()
        return result

    def complete(self, booking_id):
        self._require_login()
        result = self.client.complete_booking(booking_id)
        self._after_mutation()
        return result

    def dashboard(self):
        return DashboardService.summarize(self.bookings)

    def _require_login(self):
        if not self.is_logged_in:
            raise ClientError("Please login to book equipment.", 401)

    def _after_mutation(self):
        self.refresh_catalog()
        self.refresh_bookings()
