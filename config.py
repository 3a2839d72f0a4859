from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "amp_records"

    # Application Configuration
    environment: str = "development"
    organization_name: str = "AeroControl Systems Demo"
    server_url: str = "https://demo.aerocontrol.local"
    frontend_url: str = "http://localhost:3000"

    # Selector capacities
    aircraft_max_selections: int = 100
    document_max_selections: int = 1000
    tolerance_max_selections: int = 1000

    # Audit stamp written on every save
    default_modified_by: str = "user.edit"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings():
    return Settings()
