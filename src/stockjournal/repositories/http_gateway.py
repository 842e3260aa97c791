from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from stockjournal.config import GatewaySettings
from stockjournal.domain.errors import SubmissionError
from stockjournal.domain.models import (
    EntryTypeOption,
    JournalEntry,
    JournalListPage,
    Product,
    ProductStockInfo,
    StockCalculation,
)
from stockjournal.repositories.serializers import (
    entry_from_payload,
    entry_type_option_from_payload,
    list_page_from_payload,
    product_from_payload,
    product_stock_from_payload,
    stock_calculation_from_payload,
    to_jsonable,
    unwrap,
)

LOGGER_NAME = "stockjournal.gateway"

log = logging.getLogger(LOGGER_NAME)

BASE_PATH = "/inventory/stock-journal"


class HttpStockJournalGateway:
    """REST client for the stock journal endpoints.

    Server rejections become SubmissionError with the server's own message:
    the first field error when the body carries ``errors``, else ``message``,
    else a per-call default.
    """

    def __init__(self, settings: GatewaySettings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})
        if settings.token:
            self.session.headers["Authorization"] = f"Bearer {settings.token}"

    def _url(self, path: str) -> str:
        full = f"{BASE_PATH}{path}"
        if self.settings.tenant_slug:
            full = f"/tenant/{self.settings.tenant_slug}{full}"
        return f"{self.settings.base_url.rstrip('/')}{full}"

    @staticmethod
    def _error_from_response(r: requests.Response, default: str) -> SubmissionError:
        try:
            body = r.json()
        except ValueError:
            body = None
        message = default
        field_errors: dict = {}
        if isinstance(body, dict):
            errors = body.get("errors")
            if isinstance(errors, dict) and errors:
                field_errors = errors
                first = next(iter(errors.values()))
                if isinstance(first, list) and first:
                    message = str(first[0])
                else:
                    message = str(body.get("message") or default)
            elif body.get("message"):
                message = str(body["message"])
        return SubmissionError(message, status_code=r.status_code, field_errors=field_errors)

    def _request(self, method: str, path: str, default_error: str, **kwargs) -> Any:
        url = self._url(path)
        try:
            r = self.session.request(method, url, timeout=self.settings.timeout_seconds, **kwargs)
        except requests.RequestException as e:
            log.warning("gateway_request_failed method=%s path=%s error=%s", method, path, e)
            raise SubmissionError(default_error) from e

        if r.status_code >= 400:
            err = self._error_from_response(r, default_error)
            log.warning("gateway_rejected method=%s path=%s status=%s message=%s", method, path, r.status_code, err)
            raise err

        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise SubmissionError(default_error, status_code=r.status_code) from e

    @staticmethod
    def _entry(body: Any, required: bool = True) -> Optional[JournalEntry]:
        data = unwrap(body)
        if isinstance(data, dict):
            data = data.get("entry", data)
        if not isinstance(data, dict) or "id" not in data:
            if required:
                raise SubmissionError("Unexpected response from server.")
            return None
        return entry_from_payload(data)

    def list_entries(self, params: dict) -> JournalListPage:
        body = self._request("GET", "", "Failed to fetch stock journal entries", params=params)
        return list_page_from_payload(body or {})

    def show(self, entry_id: int) -> JournalEntry:
        return self._entry(self._request("GET", f"/{int(entry_id)}", "Failed to fetch stock journal entry"))

    def form_data(self, entry_type: Optional[str] = None) -> tuple[list[EntryTypeOption], list[Product]]:
        params = {"type": entry_type} if entry_type else {}
        body = self._request("GET", "/create", "Failed to fetch form data", params=params)
        data = unwrap(body) or {}
        types = [entry_type_option_from_payload(t) for t in data.get("entry_types") or []]
        products = [product_from_payload(p) for p in data.get("products") or []]
        return types, products

    def create(self, payload: dict) -> JournalEntry:
        body = self._request("POST", "", "Failed to create stock journal entry", json=to_jsonable(payload))
        return self._entry(body)

    def update(self, entry_id: int, payload: dict) -> JournalEntry:
        body = self._request("PUT", f"/{int(entry_id)}", "Failed to update stock journal entry", json=to_jsonable(payload))
        return self._entry(body)

    def post(self, entry_id: int) -> Optional[JournalEntry]:
        return self._entry(self._request("POST", f"/{int(entry_id)}/post", "Failed to post stock journal entry"), required=False)

    def cancel(self, entry_id: int) -> Optional[JournalEntry]:
        return self._entry(self._request("POST", f"/{int(entry_id)}/cancel", "Failed to cancel stock journal entry"), required=False)

    def delete(self, entry_id: int) -> None:
        self._request("DELETE", f"/{int(entry_id)}", "Failed to delete stock journal entry")

    def product_stock(self, product_id: int) -> ProductStockInfo:
        body = self._request("GET", f"/product-stock/{int(product_id)}", "Failed to fetch product stock")
        return product_stock_from_payload(unwrap(body) or {})

    def calculate_stock(self, product_id: int, movement_type: str, quantity) -> StockCalculation:
        body = self._request(
            "POST",
            "/calculate-stock",
            "Failed to calculate stock",
            json=to_jsonable({"product_id": int(product_id), "movement_type": movement_type, "quantity": quantity}),
        )
        return stock_calculation_from_payload(unwrap(body) or {})
