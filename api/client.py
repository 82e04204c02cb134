"""Zugriff auf die Schulverwaltungs-API (Stammdaten + Stundenplan).

``TimetableApi`` beschreibt die Schnittstelle, die Editor und Lesesichten
benötigen. ``HttpTimetableApi`` spricht die REST-API des Schulservers
(httpx, asynchron); ``data.local_store.LocalTimetableStore`` implementiert
dieselbe Schnittstelle über eine YAML-Datei.

Antwortformat der REST-API::

    {"success": true,  "data": {"timetable": [...]}}
    {"success": false, "error": {"message": "...", "code": "..."}}
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from models.catalog import SchoolClassRef, SubjectRef, TeacherRef
from models.slot import Slot, TimetableEntry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class TimetableApiError(Exception):
    """Basisklasse aller Fehler beim Lesen/Schreiben von Stundenplan-Daten."""


class ApiError(TimetableApiError):
    """Fehlerantwort oder Verbindungsfehler der REST-API."""

    def __init__(self, message: str, status: int = 0,
                 code: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code


class TimetableApi(Protocol):
    """Von Editor und Lesesichten genutzte Datenquelle."""

    async def get_classes(self) -> list[SchoolClassRef]: ...

    async def get_subjects_by_class(self, class_id: str) -> list[SubjectRef]: ...

    async def get_teachers(self) -> list[TeacherRef]: ...

    async def get_timetable(self, class_id: Optional[str] = None,
                            teacher_id: Optional[str] = None) -> list[TimetableEntry]: ...

    async def bulk_save_timetable(self, class_id: str, slots: Iterable[Slot]) -> int: ...


def _filter_param(value: Optional[str]) -> Optional[str]:
    """None, "" und "all" bedeuten: Filter weglassen."""
    if value is None or value == "" or value == "all":
        return None
    return value


def _parse_list(model: type[M], items: Optional[list], endpoint: str) -> list[M]:
    """Antwort-Datensätze validieren; ungültige Daten als ApiError melden."""
    try:
        return [model.model_validate(item) for item in items or []]
    except ValidationError as e:
        logger.error(f"Ungültige Daten von {endpoint}: {e}")
        raise ApiError(
            f"Ungültige Daten vom Server ({endpoint}): {e.error_count()} Fehler",
            status=200, code="INVALID_DATA",
        ) from e


class HttpTimetableApi:
    """REST-Client für den Schulverwaltungs-Server."""

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpTimetableApi":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # ─── Lesen ───

    async def get_classes(self) -> list[SchoolClassRef]:
        data = await self._request("GET", "/timetable/classes")
        return _parse_list(SchoolClassRef, data.get("classes"), "/timetable/classes")

    async def get_subjects_by_class(self, class_id: str) -> list[SubjectRef]:
        data = await self._request("GET", "/subjects", params={"class_id": class_id})
        return _parse_list(SubjectRef, data.get("subjects"), "/subjects")

    async def get_teachers(self) -> list[TeacherRef]:
        data = await self._request("GET", "/teachers")
        return _parse_list(TeacherRef, data.get("teachers"), "/teachers")

    async def get_timetable(self, class_id: Optional[str] = None,
                            teacher_id: Optional[str] = None) -> list[TimetableEntry]:
        params = {
            k: v for k, v in (
                ("class_id", _filter_param(class_id)),
                ("teacher_id", _filter_param(teacher_id)),
            ) if v is not None
        }
        data = await self._request("GET", "/timetable", params=params or None)
        return _parse_list(TimetableEntry, data.get("timetable"), "/timetable")

    # ─── Schreiben ───

    async def bulk_save_timetable(self, class_id: str, slots: Iterable[Slot]) -> int:
        """Ersetzt den kompletten Stundenplan der Klasse (kein Diff/Patch)."""
        entries = [s.to_payload() for s in slots]
        data = await self._request(
            "POST", "/timetable/bulk",
            json={"class_id": class_id, "entries": entries},
        )
        saved = data.get("count", len(entries))
        logger.info(f"Stundenplan {class_id} gespeichert: {saved} Einträge")
        return saved

    # ─── intern ───

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> dict:
        """Führt die Anfrage aus und gibt ``data`` aus der Antwort zurück."""
        try:
            response = await self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Netzwerkfehler bei {method} {endpoint}: {e}")
            raise ApiError(
                "Server nicht erreichbar. Bitte Verbindung prüfen.",
                status=0, code="NETWORK_ERROR",
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or body.get("success") is False:
            error = body.get("error") or {}
            message = (
                error.get("message")
                or body.get("message")
                or f"Anfrage fehlgeschlagen mit Status {response.status_code}"
            )
            logger.error(f"{method} {endpoint} → {response.status_code}: {message}")
            raise ApiError(message, status=response.status_code, code=error.get("code"))

        return body.get("data") or {}
