"""Availability API client.

A small blocking client for the ``/availability`` routes built on the
``requests`` library.  It exposes one method per operation:

* :meth:`AvailabilityAPI.check_availability` – is the slot free?
* :meth:`AvailabilityAPI.reserve_slot` – reserve a slot.
* :meth:`AvailabilityAPI.cancel_slot` – cancel an exactly matching slot.

Every method returns a ``(result, error)`` tuple.  ``error`` is
``None`` on success, otherwise a dictionary with ``status_code`` (or
``None`` for transport failures) and ``message``.  Slots may be given
as an aware ``datetime`` plus ``timedelta`` or as their wire strings.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple, Union

import requests


logger = logging.getLogger(__name__)

AVAILABILITY_PATH = "/availability"

StartLike = Union[datetime, str]
DurationLike = Union[timedelta, str]


def format_timestamp(value: StartLike) -> str:
    """Render ``value`` as an RFC3339 timestamp.

    Naive datetimes are rejected rather than guessed.
    """
    if isinstance(value, str):
        return value
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("start must be timezone-aware")
    if value.utcoffset() == timedelta(0):
        value = value.astimezone(timezone.utc)
        return value.isoformat().replace("+00:00", "Z")
    return value.isoformat()


def format_duration(value: DurationLike) -> str:
    """Render ``value`` as a duration string, e.g. ``"1h30m0s"``.

    Sub-second parts are written as fractional seconds
    (``timedelta(milliseconds=1500)`` becomes ``"1.5s"``).
    """
    if isinstance(value, str):
        return value
    total_us = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if total_us == 0:
        return "0s"
    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)
    seconds, micros = divmod(total_us, 1_000_000)
    if seconds == 0:
        if micros % 1000 == 0:
            return f"{sign}{micros // 1000}ms"
        return f"{sign}{micros}us"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    sec_text = str(secs)
    if micros:
        sec_text += ("%.6f" % (micros / 1_000_000))[1:].rstrip("0")
    if hours:
        return f"{sign}{hours}h{minutes}m{sec_text}s"
    if minutes:
        return f"{sign}{minutes}m{sec_text}s"
    return f"{sign}{sec_text}s"


class AvailabilityAPI:
    """Client for the availability service."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:8080``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _payload(start: StartLike, duration: DurationLike) -> Dict[str, str]:
        return {"start": format_timestamp(start), "duration": format_duration(duration)}

    def _request(
        self, method: str, json_body: Dict[str, str]
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request against the availability route.

        Returns:
            A tuple ``(data, error)``. ``data`` contains the parsed JSON
            response (or ``None`` for an empty body) on success and
            ``error`` is ``None``. On failure, ``data`` is ``None`` and
            ``error`` has keys ``status_code`` and ``message``.
        """
        url = f"{self.base_url}{AVAILABILITY_PATH}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("err") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Slot operations
    # ------------------------------------------------------------------
    def check_availability(
        self, start: StartLike, duration: DurationLike
    ) -> Tuple[Optional[bool], Optional[Dict[str, Any]]]:
        """Ask whether the slot is free.

        Returns:
            A tuple ``(available, error)``; ``available`` is ``None`` on failure.
        """
        data, error = self._request("GET", self._payload(start, duration))
        if error:
            return None, error
        if not isinstance(data, dict) or "available" not in data:
            return None, {"status_code": None, "message": "unexpected response body"}
        return bool(data["available"]), None

    def reserve_slot(
        self, start: StartLike, duration: DurationLike
    ) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Reserve a slot.  A ``409`` error means it overlaps an existing one."""
        _, error = self._request("POST", self._payload(start, duration))
        return error is None, error

    def cancel_slot(
        self, start: StartLike, duration: DurationLike
    ) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Cancel a reservation.  A ``404`` error means nothing matched exactly."""
        _, error = self._request("DELETE", self._payload(start, duration))
        return error is None, error
