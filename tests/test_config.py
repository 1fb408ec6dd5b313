
import pytest

from email_service.config import ConfigError, EmailServiceConfig


def test_port_is_required():
    with pytest.raises(ConfigError, match="EMAIL_PORT"):
        EmailServiceConfig.from_env({})


def test_port_must_be_an_integer():
    with pytest.raises(ConfigError):
        EmailServiceConfig.from_env({"EMAIL_PORT": "eighty"})


def test_defaults():
    config = EmailServiceConfig.from_env({"EMAIL_PORT": "6060"})

    assert config.port == 6060
    assert config.host == "0.0.0.0"
    assert config.delivery == "test"
    assert config.sender == "noreply@example.com"
    assert config.subject == "Your confirmation email"
    assert config.smtp_timeout == 10.0
    assert config.service_name == "email"
    assert config.otlp_endpoint is None


def test_smtp_settings():
    config = EmailServiceConfig.from_env({
        "EMAIL_PORT": "6060",
        "EMAIL_DELIVERY": "SMTP",
        "EMAIL_SMTP_HOST": "mail.internal",
        "EMAIL_SMTP_PORT": "587",
        "EMAIL_SMTP_USERNAME": "mailer",
        "EMAIL_SMTP_PASSWORD": "s3cret",
        "EMAIL_SMTP_STARTTLS": "true",
        "EMAIL_SMTP_TIMEOUT": "2.5",
        "OTEL_EXPORTER_OTLP_ENDPOINT": "http://otel-collector:4317",
    })

    assert config.delivery == "smtp"
    assert config.smtp_host == "mail.internal"
    assert config.smtp_port == 587
    assert config.smtp_username == "mailer"
    assert config.smtp_password == "s3cret"
    assert config.smtp_starttls is True
    assert config.smtp_timeout == 2.5
    assert config.otlp_endpoint == "http://otel-collector:4317"


def test_unknown_delivery_mode():
    with pytest.raises(ConfigError, match="EMAIL_DELIVERY"):
        EmailServiceConfig.from_env({"EMAIL_PORT": "6060", "EMAIL_DELIVERY": "carrier-pigeon"})


def test_timeout_must_be_positive():
    with pytest.raises(ConfigError, match="EMAIL_SMTP_TIMEOUT"):
        EmailServiceConfig.from_env({"EMAIL_PORT": "6060", "EMAIL_SMTP_TIMEOUT": "0"})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("EMAIL_PORT", "7070")
    assert EmailServiceConfig.from_env().port == 7070


def test_config_is_immutable():
    config = EmailServiceConfig(port=1)
    with pytest.raises(Exception):
        config.port = 2
