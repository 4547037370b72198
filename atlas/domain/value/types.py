"""Domain value objects for Atlas Cívico.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import math
from datetime import datetime
from enum import Enum

from pydantic import field_validator, model_validator

from atlas.domain.value.common import ValueObject

DEFAULT_CATEGORY = "Outros"
ANONYMOUS_AUTHOR = "Usuário Anônimo"
DEFAULT_USER_NAME = "Usuário"

# Categories offered by the reporting form; the set stays open.
DEFAULT_CATEGORIES = (
    "Limpeza urbana / Acúmulo de lixo",
    "Iluminação pública",
    "Saneamento / Vazamento de água",
    "Sinalização danificada",
    "Calçadas / Acessibilidade",
    "Trânsito / Superlotação ou parada de ônibus",
    "Meio ambiente (árvores quebradas, áreas destruídas)",
    "Segurança (como falta de policiamento, zonas escuras)",
    DEFAULT_CATEGORY,
)


class IssueStatus(str, Enum):
    """Triage status of an issue."""

    RECEIVED = "Received"
    UNDER_REVIEW = "UnderReview"
    RESOLVED = "Resolved"

    @classmethod
    def parse(cls, value: object) -> "IssueStatus":
        """Parse a stored status, accepting legacy Portuguese labels.

        Unknown or missing values fall back to RECEIVED.
        """
        if isinstance(value, IssueStatus):
            return value
        if isinstance(value, str):
            normalized = value.strip()
            try:
                return cls(normalized)
            except ValueError:
                legacy = _LEGACY_STATUS_LABELS.get(normalized.lower())
                if legacy is not None:
                    return legacy
        return cls.RECEIVED


_LEGACY_STATUS_LABELS = {
    "recebido": IssueStatus.RECEIVED,
    "em análise": IssueStatus.UNDER_REVIEW,
    "em analise": IssueStatus.UNDER_REVIEW,
    "resolvido": IssueStatus.RESOLVED,
}


class UserRole(str, Enum):
    """Role of an application user."""

    USER = "user"
    ADMIN = "admin"


class GeoPoint(ValueObject):
    """Geographic coordinate in decimal degrees (WGS84)."""

    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Validate latitude is finite and within [-90, 90]."""
        if not math.isfinite(v) or not -90.0 <= v <= 90.0:
            raise ValueError("Latitude must be a finite number between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Validate longitude is finite and within [-180, 180]."""
        if not math.isfinite(v) or not -180.0 <= v <= 180.0:
            raise ValueError("Longitude must be a finite number between -180 and 180")
        return v

    def as_literal(self) -> str:
        """Coordinate literal used when no address can be resolved."""
        return f"{self.latitude:.5f}, {self.longitude:.5f}"


class BoundingBox(ValueObject):
    """Viewport bounds as west/south/east/north in degrees.

    ``west`` may be greater than ``east`` when the box crosses the
    antimeridian.
    """

    west: float
    south: float
    east: float
    north: float

    @model_validator(mode="after")
    def validate_latitudes(self) -> "BoundingBox":
        """Validate the latitude span is not inverted."""
        if self.south > self.north:
            raise ValueError("South bound must not be greater than north bound")
        return self

    @classmethod
    def world(cls) -> "BoundingBox":
        """Bounding box covering the whole map."""
        return cls(west=-180.0, south=-85.0, east=180.0, north=85.0)


class AuthIdentity(ValueObject):
    """Signed-in identity as reported by the authentication provider."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None

    @property
    def is_first_sign_in(self) -> bool:
        """A first-ever sign-in has identical creation and last sign-in times."""
        return (
            self.created_at is not None
            and self.last_sign_in_at is not None
            and self.created_at == self.last_sign_in_at
        )


class GeocodeResult(ValueObject):
    """A ranked place suggestion from forward geocoding."""

    point: GeoPoint
    label: str
