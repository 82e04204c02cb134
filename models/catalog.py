"""Stammdaten externer Verwaltungs-Module (nur lesend genutzt)."""

from typing import Optional

from pydantic import BaseModel


class SubjectRef(BaseModel):
    """Ein Fach aus dem Fächer-Katalog einer Klasse."""

    id: str
    name: str
    code: Optional[str] = None


class TeacherRef(BaseModel):
    """Eine Lehrkraft aus dem Lehrer-Verzeichnis."""

    id: str
    name: str
    subject_specialization: Optional[str] = None
    email: Optional[str] = None


class SchoolClassRef(BaseModel):
    """Eine Klasse (z.B. name="10", section="A")."""

    id: str
    name: str
    section: Optional[str] = None

    @property
    def label(self) -> str:
        """Anzeigename, z.B. "10-A"."""
        return f"{self.name}-{self.section}" if self.section else self.name
