"""
Core configuration for the Food Ordering API
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Configuration
    PROJECT_NAME: str = "Food Ordering API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./food_ordering.db"
    SQL_ECHO: bool = False  # Set to True for SQL query logging

    # Session tokens
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 30
    BCRYPT_ROUNDS: int = 12

    # CORS Configuration
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Image Upload Configuration
    MAX_IMAGES_PER_UPLOAD: int = 5
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/png", "image/webp"]

    # Remote image storage (S3)
    S3_BUCKET_NAME: str = "food-ordering-images"
    S3_IMAGE_FOLDER: str = "food-ordering"
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

# Global settings instance
settings = Settings()
