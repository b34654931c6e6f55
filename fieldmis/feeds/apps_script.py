from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import requests

from ..models.attendance import AttendanceRecord
from ..models.config_models import HttpConfig

"""Client for the Google Apps Script write endpoint.

Contract:
- POST to a single URL, ``Content-Type: text/plain``, body is a JSON object
  with an ``action`` discriminator (attendance submissions carry no action)
- the script answers JSON; ``status == "success"`` or ``result == "success"``
  means success, anything else is a failure whose ``message`` (or ``error``)
  is shown to the user

Every call is a single fire-and-forget POST: no retry and no idempotency key,
so resubmitting after a network error can append a duplicate sheet row.
"""

__all__ = [
    "AppsScriptClient",
    "WriteResult",
    "GENERIC_FAILURE_MESSAGE",
]

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Submission failed. Please check your connection and try again."


@dataclass(frozen=True)
class WriteResult:
    ok: bool
    message: str = ""
    payload: dict[str, Any] | None = None  # decoded response body when available


def _interpret(body: Any) -> WriteResult:
    if not isinstance(body, dict):
        return WriteResult(ok=False, message=GENERIC_FAILURE_MESSAGE)
    if body.get("status") == "success" or body.get("result") == "success":
        return WriteResult(ok=True, message=str(body.get("message") or ""), payload=body)
    message = body.get("message") or body.get("error") or GENERIC_FAILURE_MESSAGE
    return WriteResult(ok=False, message=str(message), payload=body)


class AppsScriptClient:
    def __init__(self, url: str, http: HttpConfig | None = None, session: Any = None) -> None:
        if not url:
            raise ValueError("Apps Script URL is not configured")
        self.url = url
        self.http = http or HttpConfig()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> AppsScriptClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def post(self, payload: dict[str, Any]) -> WriteResult:
        """Send one JSON payload; never raises for transport or script errors."""
        action = payload.get("action", "<form>")
        try:
            resp = self.session.post(
                self.url,
                data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
                timeout=self.http.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"apps script {action}: {e}")
            return WriteResult(ok=False, message=f"Connection error: {e}")

        if not resp.ok:
            logger.error(f"apps script {action}: HTTP {resp.status_code}")
            return WriteResult(
                ok=False,
                message=f"Submission failed. The server responded with status {resp.status_code}.",
            )
        try:
            body = resp.json()
        except ValueError:
            logger.error(f"apps script {action}: non-JSON response")
            return WriteResult(ok=False, message=GENERIC_FAILURE_MESSAGE)

        result = _interpret(body)
        if result.ok:
            logger.info(f"apps script {action}: success")
        else:
            logger.warning(f"apps script {action}: {result.message}")
        return result

    def call(self, action: str, **fields: Any) -> WriteResult:
        return self.post({"action": action, **fields})

    # --- actions -------------------------------------------------------

    def submit_attendance(self, record: AttendanceRecord) -> WriteResult:
        return self.post(record.to_payload())

    def add_photo(self, image_base64: str, file_name: str, *, type: str = "gallery",
                  activity: str = "Uncategorized", description: str = "") -> WriteResult:
        return self.call(
            "addPhoto",
            data=image_base64,
            fileName=file_name,
            type=type,
            activity=activity,
            description=description,
        )

    def delete_photo(self, url: str) -> WriteResult:
        return self.call("deletePhoto", url=url)

    def add_maintenance_bill(self, date: str, category: str, amount: float | str,
                             description: str, image_base64: str | None = None) -> WriteResult:
        return self.call(
            "addBill",
            date=date,
            category=category,
            amount=amount,
            description=description,
            data=image_base64,
        )

    def update_bill_status(self, bill_id: str, status: str) -> WriteResult:
        return self.call("updateBillStatus", id=bill_id, status=status)

    def update_asset(self, asset_id: str, **fields: Any) -> WriteResult:
        return self.call("updateAsset", id=asset_id, **fields)

    def add_achievement(self, component_id: str, value: float | str, gp: str = "", remarks: str = "") -> WriteResult:
        return self.call("addAchievement", id=component_id, value=value, gp=gp, remarks=remarks)
