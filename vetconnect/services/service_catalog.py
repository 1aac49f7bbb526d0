"""Searchable multi-select over the fixed service catalog."""
from typing import List, Optional, Sequence

from vetconnect.core.constants import AVAILABLE_SERVICES, SERVICES_SEPARATOR
from vetconnect.schemas.clinic import ClinicDraft


def parse_services(services: Optional[str]) -> List[str]:
    """Split a stored services string back into a selection list."""
    if not services:
        return []
    return [s.strip() for s in services.split(",") if s.strip()]


def join_services(selected: Sequence[str]) -> str:
    return SERVICES_SEPARATOR.join(selected)


class ServiceCatalogSelector:
    """Service picker dialog state.

    `selected` is shared with the wizard and changes on every toggle; the
    draft's `services` string only changes on confirm() or remove().
    """

    def __init__(self, catalog: Sequence[str] = AVAILABLE_SERVICES):
        self.catalog = tuple(catalog)
        self.selected: List[str] = []
        self.search: str = ""
        self.is_open: bool = False

    def reset(self, selected: Sequence[str] = ()) -> None:
        self.selected = list(selected)
        self.search = ""
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def filter(self, query: Optional[str] = None) -> List[str]:
        query = self.search if query is None else query
        if not (query or "").strip():
            return list(self.catalog)
        # whitespace is only ignored for the blank check
        needle = query.lower()
        return [service for service in self.catalog if needle in service.lower()]

    def set_search(self, query: str) -> List[str]:
        self.search = query or ""
        return self.filter()

    def toggle(self, service: str) -> List[str]:
        if service not in self.catalog:
            raise ValueError(f"Unknown service: {service}")
        if service in self.selected:
            self.selected.remove(service)
        else:
            self.selected.append(service)
        return self.selected

    def select_all(self) -> List[str]:
        # replaces the selection with what is currently visible
        self.selected = self.filter()
        return self.selected

    def deselect_all(self) -> List[str]:
        self.selected = []
        return self.selected

    def confirm(self, draft: ClinicDraft) -> str:
        draft.services = join_services(self.selected)
        self.search = ""
        self.is_open = False
        return draft.services

    def cancel(self) -> None:
        # toggles made while the dialog was open are kept
        self.search = ""
        self.is_open = False

    def remove(self, service: str, draft: ClinicDraft) -> str:
        self.selected = [s for s in self.selected if s != service]
        draft.services = join_services(self.selected)
        return draft.services
