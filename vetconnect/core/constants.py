"""Application constants: roles, wizard steps and the service catalog."""
from enum import Enum, IntEnum


class UserRole(str, Enum):
    PET_OWNER = "pet_owner"
    CLINIC_OWNER = "clinic_owner"
    ADMIN = "admin"


class WizardMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class WizardStep(IntEnum):
    BASIC_INFO = 1
    LOCATION_CONTACT = 2
    SERVICES_HOURS = 3
    ADDITIONAL_DETAILS = 4


FIRST_STEP = WizardStep.BASIC_INFO
LAST_STEP = WizardStep.ADDITIONAL_DETAILS

STEP_TITLES = {
    WizardStep.BASIC_INFO: "Basic Information",
    WizardStep.LOCATION_CONTACT: "Location & Contact",
    WizardStep.SERVICES_HOURS: "Services & Hours",
    WizardStep.ADDITIONAL_DETAILS: "Additional Details",
}

AVAILABLE_SERVICES = (
    "Vaccination",
    "Surgery",
    "Grooming",
    "Dental Care",
    "Checkups/Consultation",
    "Emergency Care",
    "Laboratory Tests",
    "Deworming",
    "Spay/Neuter",
    "Pet Boarding",
    "X-Ray/Imaging",
    "Microchipping",
)

SERVICES_SEPARATOR = ", "

# Local key-value store keys
CLINICS_KEY = "vetconnect-clinics"
ACTIVE_CLINIC_KEY = "vetconnect-active-clinic"
SETTING_KEY_PREFIX = "setting:"

CLINIC_ID_PREFIX = "clinic_"
