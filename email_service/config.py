
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

DELIVERY_MODES = ("test", "smtp")


class ConfigError(RuntimeError):
    """Raised when the environment does not describe a runnable service."""


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class EmailServiceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    port: int
    host: str = "0.0.0.0"
    delivery: str = "test"
    sender: str = "noreply@example.com"
    subject: str = "Your confirmation email"
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_starttls: bool = False
    smtp_timeout: float = 10.0
    service_name: str = "email"
    otlp_endpoint: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EmailServiceConfig":
        """
        Build the config once at startup. EMAIL_PORT is required; everything
        else falls back to a default suitable for local runs.
        """
        env = os.environ if environ is None else environ

        raw_port = env.get("EMAIL_PORT")
        if not raw_port:
            raise ConfigError("Required environment variable 'EMAIL_PORT' is not set.")

        delivery = env.get("EMAIL_DELIVERY", "test").strip().lower()
        if delivery not in DELIVERY_MODES:
            raise ConfigError(
                f"EMAIL_DELIVERY must be one of {', '.join(DELIVERY_MODES)}, got '{delivery}'"
            )

        try:
            port = int(raw_port)
            smtp_port = int(env.get("EMAIL_SMTP_PORT", 25))
            smtp_timeout = float(env.get("EMAIL_SMTP_TIMEOUT", 10.0))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        if smtp_timeout <= 0:
            raise ConfigError("EMAIL_SMTP_TIMEOUT must be positive")

        return cls(
            port=port,
            host=env.get("EMAIL_HOST", "0.0.0.0"),
            delivery=delivery,
            sender=env.get("EMAIL_FROM", "noreply@example.com"),
            subject=env.get("EMAIL_SUBJECT", "Your confirmation email"),
            smtp_host=env.get("EMAIL_SMTP_HOST", "localhost"),
            smtp_port=smtp_port,
            smtp_username=env.get("EMAIL_SMTP_USERNAME") or None,
            smtp_password=env.get("EMAIL_SMTP_PASSWORD") or None,
            smtp_starttls=_truthy(env.get("EMAIL_SMTP_STARTTLS", "false")),
            smtp_timeout=smtp_timeout,
            service_name=env.get("OTEL_SERVICE_NAME", "email"),
            otlp_endpoint=env.get("OTEL_EXPORTER_OTLP_ENDPOINT") or None,
        )
