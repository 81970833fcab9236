import pytest

from regportal.config import DEFAULT_TARGET_EMAIL, Settings, load_env_files
from regportal.errors import ConfigurationError

ENV_VARS = ("EMAIL_USER", "EMAIL_PASS", "OTP_SECRET", "TARGET_EMAIL", "SMTP_HOST",
            "SMTP_PORT", "SMTP_SSL", "SMTP_TIMEOUT", "OTP_WINDOW_SECONDS",
            "OTP_TOLERANCE_WINDOWS", "LOG_LEVEL")

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

def test_defaults():
    s = Settings.from_env()
    assert s.email_user is None and s.otp_secret is None
    assert s.target_email == DEFAULT_TARGET_EMAIL
    assert (s.smtp_host, s.smtp_port, s.smtp_ssl) == ("smtp.gmail.com", 587, False)
    assert (s.otp_window_seconds, s.otp_tolerance_windows) == (300, 1)

def test_from_env(monkeypatch):
    monkeypatch.setenv("EMAIL_USER", "sender@example.com")
    monkeypatch.setenv("EMAIL_PASS", "pw")
    monkeypatch.setenv("OTP_SECRET", "topsecret")
    monkeypatch.setenv("TARGET_EMAIL", "ops@example.com")
    monkeypatch.setenv("SMTP_PORT", "465")
    monkeypatch.setenv("SMTP_SSL", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    s = Settings.from_env()
    assert s.target_email == "ops@example.com"
    assert s.smtp_port == 465 and s.smtp_ssl is True
    assert s.log_level == "debug"
    s.require_mail()
    s.require_secret()

def test_otp_secret_is_not_stripped(monkeypatch):
    monkeypatch.setenv("OTP_SECRET", "  padded secret ")
    assert Settings.from_env().otp_secret == "  padded secret "

def test_empty_otp_secret_is_unset(monkeypatch):
    monkeypatch.setenv("OTP_SECRET", "")
    with pytest.raises(ConfigurationError):
        Settings.from_env().require_secret()

def test_blank_target_falls_back(monkeypatch):
    monkeypatch.setenv("TARGET_EMAIL", "  ")
    assert Settings.from_env().target_email == DEFAULT_TARGET_EMAIL

def test_secrets_hidden_from_repr():
    s = Settings(email_user="u@example.com", email_pass="pw-value", otp_secret="otp-value")
    assert "pw-value" not in repr(s)
    assert "otp-value" not in repr(s)

def test_require_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        Settings(email_user="u@example.com").require_mail()
    with pytest.raises(ConfigurationError):
        Settings().require_secret()

def test_env_files(tmp_path, monkeypatch):
    envd = tmp_path / ".env.d"
    envd.mkdir()
    (envd / "10-mail").write_text("EMAIL_USER=fragment@example.com\n")
    monkeypatch.setenv("EMAIL_PASS", "already-set")
    (tmp_path / ".env").write_text("OTP_SECRET=from-dotenv\nEMAIL_USER=dotenv@example.com\nEMAIL_PASS=ignored\n")

    load_env_files(str(tmp_path))
    s = Settings.from_env()
    assert s.otp_secret == "from-dotenv"
    assert s.email_user == "fragment@example.com"
    assert s.email_pass == "already-set"

def test_create_app_reads_environment(tmp_path, monkeypatch):
    from regportal import create_app

    monkeypatch.setenv("REGPORTAL_HOME", str(tmp_path))
    (tmp_path / ".env").write_text("OTP_SECRET=app-secret\nOTP_WINDOW_SECONDS=600\n")
    app = create_app()
    settings = app.extensions["regportal.settings"]
    assert settings.otp_secret == "app-secret"
    assert settings.otp_window_seconds == 600
