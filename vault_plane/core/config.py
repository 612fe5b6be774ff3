from pydantic import BaseModel
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Vault Plane"
    DATABASE_URL: str = "sqlite:///./vault.db"
    FOLDERS_ENABLED: bool = True
    RESOURCE_TYPES_ENABLED: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


class FeatureFlags(BaseModel):
    """Optional features the resource finder honours when composing queries."""

    folders: bool = True
    resource_types: bool = True

    @classmethod
    def from_settings(cls, source: Settings) -> "FeatureFlags":
        return cls(
            folders=source.FOLDERS_ENABLED,
            resource_types=source.RESOURCE_TYPES_ENABLED,
        )


settings = Settings()
