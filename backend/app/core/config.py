from pydantic import model_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import List, Optional


class Settings(BaseSettings):
    APP_NAME: str = "Ward Dashboard Backend"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Local development database; replaced by the Cloud SQL settings below when they are set
    DATABASE_URL: str = "sqlite:///./ward_dashboard.db"

    # Cloud SQL (MySQL) settings
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None
    DB_NAME: Optional[str] = None
    DB_HOST: str = "127.0.0.1"
    DB_PORT: int = 3306
    CLOUD_SQL_CONNECTION_NAME: Optional[str] = None

    # Object storage
    GCP_PROJECT: Optional[str] = None
    LOCAL_STORAGE_DIR: Optional[str] = None  # read CSVs from <dir>/<bucket>/<name> instead of GCS

    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

    @model_validator(mode="after")
    def _check_db_credentials(self):
        triple = (self.DB_USER, self.DB_PASS, self.DB_NAME)
        if any(triple) and not all(triple):
            raise ValueError("DB_USER, DB_PASS and DB_NAME must be set together")
        return self

    @property
    def database_url(self) -> str:
        if not self.DB_USER:
            return self.DATABASE_URL
        if self.CLOUD_SQL_CONNECTION_NAME:
            url = URL.create(
                "mysql+pymysql",
                username=self.DB_USER,
                password=self.DB_PASS,
                database=self.DB_NAME,
                query={"unix_socket": f"/cloudsql/{self.CLOUD_SQL_CONNECTION_NAME}"},
            )
        else:
            url = URL.create(
                "mysql+pymysql",
                username=self.DB_USER,
                password=self.DB_PASS,
                host=self.DB_HOST,
                port=self.DB_PORT,
                database=self.DB_NAME,
            )
        return url.render_as_string(hide_password=False)


settings = Settings()
