from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_VERSION_PATH = "api/v4/"


class Settings(BaseSettings):
    APP_NAME: str = "gitlab-deployments"

    GITLAB_BASE_URL: str = Field("https://gitlab.com/api/v4/", alias="GITLAB_BASE_URL")
    GITLAB_TOKEN: Optional[str] = Field(None, alias="GITLAB_TOKEN")
    # private -> PRIVATE-TOKEN, oauth -> Authorization: Bearer, job -> JOB-TOKEN
    GITLAB_TOKEN_TYPE: Literal["private", "oauth", "job"] = Field("private", alias="GITLAB_TOKEN_TYPE")
    GITLAB_TIMEOUT: float = Field(30.0, alias="GITLAB_TIMEOUT")
    GITLAB_USER_AGENT: str = Field("gitlab-deployments/0.1.0", alias="GITLAB_USER_AGENT")

    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")
    LOG_REQUEST_DETAILS: bool = Field(False, alias="LOG_REQUEST_DETAILS")
    PORT: int = Field(8001, alias="PORT")

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True, extra="ignore")

    @field_validator("GITLAB_BASE_URL")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        return normalize_base_url(value)


def normalize_base_url(url: str) -> str:
    """Make sure the URL ends with the ``api/v4/`` prefix and a trailing slash."""
    url = url.strip()
    if not url.endswith("/"):
        url += "/"
    if not url.endswith(API_VERSION_PATH):
        url += API_VERSION_PATH
    return url


settings = Settings()
