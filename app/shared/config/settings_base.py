# -*- coding: utf-8 -*-
"""
app/shared/config/settings_base.py

Base de configuración (Pydantic v2) del backend escolar.
- Esta clase NO instancia singletons; eso lo hace app.shared.config.get_settings().
- Lee variables de entorno y, si existe, el archivo .env del proyecto.

Autor: Equipo Backend Escolar
Fecha: 2026-03-02
"""

from typing import Literal, Optional

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="School Ledger", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # =========================
    # Base de datos
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="school", validation_alias="DB_NAME")
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=5, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        URL de conexión para SQLAlchemy async.
        Prioriza DB_URL (normalizando el esquema postgres → asyncpg);
        si no existe, la construye desde los componentes individuales.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("sqlite"):
                return url
            return (
                url.replace("postgres://", "postgresql+asyncpg://")
                   .replace("postgresql://", "postgresql+asyncpg://")
            )

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # CORS
    # =========================
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

    # =========================
    # Auth / JWT (solo validación; la emisión es externa)
    # =========================
    jwt_secret_key: SecretStr = Field(default=SecretStr("please-change-me"), validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(default="HS256", validation_alias="JWT_ALGORITHM")

    # =========================
    # Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["plain", "pretty", "json"] = Field(default="plain", validation_alias="LOG_FORMAT")

    # =========================
    # Email (notificaciones de pago)
    # =========================
    email_mode: Literal["console", "smtp"] = Field(default="console", validation_alias="EMAIL_MODE")
    email_server: Optional[str] = Field(default=None, validation_alias="EMAIL_SERVER")
    email_port: int = Field(default=587, validation_alias="EMAIL_PORT")
    email_username: Optional[str] = Field(default=None, validation_alias="EMAIL_USERNAME")
    email_password: Optional[SecretStr] = Field(default=None, validation_alias="EMAIL_PASSWORD")
    email_from: Optional[str] = Field(default=None, validation_alias="EMAIL_FROM")
    email_from_name: str = Field(default="Control Escolar", validation_alias="EMAIL_FROM_NAME")
    email_use_ssl: bool = Field(default=False, validation_alias="EMAIL_USE_SSL")
    email_use_tls: bool = Field(default=True, validation_alias="EMAIL_USE_TLS")
    email_timeout_sec: int = Field(default=30, validation_alias="EMAIL_TIMEOUT_SEC")
    email_tls_verify: bool = Field(default=True, validation_alias="EMAIL_TLS_VERIFY")

    # =========================
    # Métricas
    # =========================
    metrics_enabled: bool = Field(default=True, validation_alias="METRICS_ENABLED")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @property
    def is_production(self) -> bool:
        return self.python_env == "production"

    def get_cors_origins(self) -> list[str]:
        """Lista de orígenes CORS a partir de CORS_ORIGINS separado por comas."""
        raw = (self.allowed_origins or "").strip()
        if not raw or raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName"]
# Fin del archivo app/shared/config/settings_base.py
