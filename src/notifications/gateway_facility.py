from __future__ import annotations

import logging
from typing import List

import requests

from notifications.base import NotificationFacility
from timeline_planner.errors import NotificationFacilityUnavailable
from timeline_planner.models import ReminderInstance

logger = logging.getLogger(__name__)


class HttpNotificationFacility(NotificationFacility):
    """Talks to a push/notification gateway over HTTP.

    Expected endpoints:
      POST {base}/notifications/schedule  {"notifications": [<ReminderInstance>...]}
      POST {base}/notifications/cancel    {"notifications": [{"id": <int>}...]}
      GET  {base}/notifications           {"notifications": [<ReminderInstance>...]}
    """

    def __init__(self, base_url: str, timeout_s: float = 2.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
            resp.raise_for_status()
            return resp
        except requests.RequestException as e:
            logger.error("Notification gateway %s %s failed: %s", method, url, e)
            raise NotificationFacilityUnavailable(str(e)) from e

    def schedule(self, reminders: List[ReminderInstance]) -> None:
        payload = {"notifications": [r.model_dump(mode="json") for r in reminders]}
        self._request("POST", "/notifications/schedule", json=payload)

    def cancel(self, identifiers: List[int]) -> None:
        payload = {"notifications": [{"id": i} for i in identifiers]}
        self._request("POST", "/notifications/cancel", json=payload)

    def pending(self) -> List[ReminderInstance]:
        resp = self._request("GET", "/notifications")
        try:
            data = resp.json()
            return [ReminderInstance(**item) for item in data.get("notifications", [])]
        except (ValueError, TypeError, AttributeError) as e:
            # covers non-JSON bodies as well as records that fail validation
            logger.error("Notification gateway returned an unreadable pending list: %s", e)
            raise NotificationFacilityUnavailable(f"unreadable pending list: {e}") from e
