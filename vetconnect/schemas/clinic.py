"""Clinic related schemas."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and in stored records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Veterinarian(CamelModel):
    id: str
    name: str
    specialization: str
    phone: Optional[str] = ""
    email: Optional[str] = ""


class VeterinarianCreate(CamelModel):
    name: str = ""
    specialization: str = ""
    phone: Optional[str] = ""
    email: Optional[str] = ""


class ClinicDraft(CamelModel):
    clinic_name: str = ""
    address: str = ""
    coordinates: Optional[Coordinates] = None
    contact_number: str = ""
    open_hours: str = ""
    services: str = ""
    description: str = ""
    veterinarians: List[Veterinarian] = Field(default_factory=list)
    profile_picture: str = ""
    gallery_photos: List[str] = Field(default_factory=list)


class DraftUpdate(CamelModel):
    """Partial draft edit coming from a form field change."""

    clinic_name: Optional[str] = None
    address: Optional[str] = None
    contact_number: Optional[str] = None
    open_hours: Optional[str] = None
    description: Optional[str] = None


class PersistedClinic(CamelModel):
    """A stored clinic record.

    Extra keys are allowed so records written by other clients survive a
    read/write cycle untouched.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None
    clinic_name: str = ""
    address: str = ""
    contact_number: str = ""
    open_hours: str = ""
    services: str = ""
    description: str = ""
    veterinarians: List[Veterinarian] = Field(default_factory=list)
    profile_picture: str = ""
    gallery_photos: List[str] = Field(default_factory=list)
    rating: float = 0
    review_count: int = 0
    verified: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[Dict[str, float]] = None
    coords: Optional[List[float]] = None
    coordinates: Optional[Coordinates] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ClinicListResponse(CamelModel):
    items: List[PersistedClinic]
    total: int
    active_clinic_id: Optional[str] = None


class ActiveClinicUpdate(CamelModel):
    clinic_id: str


class GeocodeResult(BaseModel):
    lat: float
    lng: float
    address: str


class ReverseGeocodeResponse(BaseModel):
    latitude: float
    longitude: float
    address: str


class LocationSelection(BaseModel):
    """Map picker confirmation.

    `position` accepts any coordinate shape the normalizer understands:
    `[lat, lng]`, `{"lat", "lng"}`, `{"latitude", "longitude"}` and so on.
    """

    position: Any
    address: Optional[str] = None
