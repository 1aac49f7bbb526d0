import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


class Settings:
    ENV: str = os.getenv("ENV", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    APP_NAME: str = os.getenv("APP_NAME", "VetConnect")

    # Database (backs the local key-value store)
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", 20))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", 10))

    # Identity tokens
    SECRET_KEY: str = os.getenv("SECRET_KEY")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

    # Remote document store
    DOCUMENT_STORE_BACKEND: str = os.getenv("DOCUMENT_STORE_BACKEND", "memory")
    FIRESTORE_PROJECT_ID: Optional[str] = os.getenv("FIRESTORE_PROJECT_ID")
    CLINICS_COLLECTION: str = os.getenv("CLINICS_COLLECTION", "clinics")

    # Geocoding (Nominatim)
    NOMINATIM_BASE_URL: str = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org").rstrip("/")
    NOMINATIM_USER_AGENT: str = os.getenv("NOMINATIM_USER_AGENT", "VetConnect/1.0 (support@vetconnect.app)")
    GEOCODING_TIMEOUT_SECONDS: Optional[float] = _optional_float("GEOCODING_TIMEOUT_SECONDS")
    GEOCODING_CACHE_ENABLED: bool = os.getenv("GEOCODING_CACHE_ENABLED", "False").lower() == "true"
    GEOCODING_CACHE_SECONDS: int = int(os.getenv("GEOCODING_CACHE_SECONDS", 3600))

    # Redis
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Media storage
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local")
    MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", 5))
    MAX_GALLERY_PHOTOS: int = int(os.getenv("MAX_GALLERY_PHOTOS", 6))

    AWS_S3_BUCKET: Optional[str] = os.getenv("AWS_S3_BUCKET")
    AWS_REGION: Optional[str] = os.getenv("AWS_REGION")
    AWS_ACCESS_KEY_ID: Optional[str] = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_PUBLIC_BASE_URL: Optional[str] = os.getenv("AWS_PUBLIC_BASE_URL")

    CLOUDINARY_CLOUD_NAME: Optional[str] = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY: Optional[str] = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET: Optional[str] = os.getenv("CLOUDINARY_API_SECRET")
    CLOUDINARY_FOLDER: str = os.getenv("CLOUDINARY_FOLDER", "vetconnect/clinics")

    # CORS
    BACKEND_CORS_ORIGINS: Optional[str] = os.getenv("BACKEND_CORS_ORIGINS")

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "True").lower() == "true"
    RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", 100))
    RATE_LIMIT_PERIOD_SECONDS: int = int(os.getenv("RATE_LIMIT_PERIOD_SECONDS", 60))


settings = Settings()
