"""API-Modul: Schnittstelle zur Schulverwaltung (REST via httpx)."""

from api.client import ApiError, HttpTimetableApi, TimetableApi, TimetableApiError

__all__ = ["ApiError", "HttpTimetableApi", "TimetableApi", "TimetableApiError"]
