"""
Service settings loaded once from the environment.

Both services read ``PORT``; the backend also reads the runtime environment
tag, the telemetry client id and the SQL connection string (presence only).
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SQL_NOT_CONFIGURED = "Not configured"


class BackendSettings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    port: int = 3001
    host: str = "0.0.0.0"
    environment: str = Field(
        "production", validation_alias=AliasChoices("environment", "NODE_ENV", "APP_ENV")
    )
    client_id: str = Field("N/A", validation_alias=AliasChoices("client_id", "AZURE_CLIENT_ID"))
    sql_connection_string: str = Field(
        SQL_NOT_CONFIGURED,
        validation_alias=AliasChoices("sql_connection_string", "SQL_CONNECTION_STRING"),
    )
    data_error_rate: float = Field(0.2, ge=0.0, le=1.0)
    log_level: str = "INFO"

    @property
    def sql_configured(self) -> bool:
        value = self.sql_connection_string
        return bool(value) and value != SQL_NOT_CONFIGURED


class FrontendSettings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    port: int = 3000
    host: str = "0.0.0.0"
    api_url: str = "http://localhost:3001"
    log_level: str = "INFO"
