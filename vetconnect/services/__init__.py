"""Service layer package."""

__all__ = [
    "step_validator",
    "service_catalog",
    "wizard_service",
    "local_store",
    "settings_repository",
    "document_store",
    "mirror_outbox",
    "clinic_writer",
    "geocoding_service",
    "media_service",
]
