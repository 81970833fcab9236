# regportal/config.py
# Process-wide settings, read once from the environment (after .env loading)
# and handed to the app explicitly.

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .otp import DEFAULT_TOLERANCE_WINDOWS, DEFAULT_WINDOW_SECONDS

DEFAULT_HOME = "/opt/regportal"
DEFAULT_TARGET_EMAIL = "registrations@example.com"

def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

def _env_str(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None

def load_env_files(home: Optional[str] = None) -> None:
    # .env never overrides the real environment; .env.d fragments override in order
    home = home or os.getenv("REGPORTAL_HOME", DEFAULT_HOME)
    load_dotenv(dotenv_path=os.path.join(home, ".env"), override=False)

    envd = os.path.join(home, ".env.d")
    if os.path.isdir(envd):
        for name in sorted(os.listdir(envd)):
            p = os.path.join(envd, name)
            if os.path.isfile(p):
                load_dotenv(dotenv_path=p, override=True)

@dataclass(frozen=True)
class Settings:
    email_user: Optional[str] = None
    email_pass: Optional[str] = field(default=None, repr=False)
    otp_secret: Optional[str] = field(default=None, repr=False)
    target_email: str = DEFAULT_TARGET_EMAIL
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_ssl: bool = False
    smtp_timeout: float = 30.0
    otp_window_seconds: int = DEFAULT_WINDOW_SECONDS
    otp_tolerance_windows: int = DEFAULT_TOLERANCE_WINDOWS
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            email_user=_env_str("EMAIL_USER"),
            email_pass=_env_str("EMAIL_PASS"),
            # opaque key material: used byte for byte, only an empty value counts as unset
            otp_secret=os.getenv("OTP_SECRET") or None,
            target_email=_env_str("TARGET_EMAIL") or DEFAULT_TARGET_EMAIL,
            smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_ssl=_env_bool("SMTP_SSL"),
            smtp_timeout=float(os.getenv("SMTP_TIMEOUT", "30")),
            otp_window_seconds=int(os.getenv("OTP_WINDOW_SECONDS", str(DEFAULT_WINDOW_SECONDS))),
            otp_tolerance_windows=int(os.getenv("OTP_TOLERANCE_WINDOWS", str(DEFAULT_TOLERANCE_WINDOWS))),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )

    def require_mail(self) -> None:
        missing = [name for name, value in (("EMAIL_USER", self.email_user),
                                            ("EMAIL_PASS", self.email_pass))
                   if not value]
        if missing:
            raise ConfigurationError(f"missing {', '.join(missing)}")

    def require_secret(self) -> None:
        if not self.otp_secret:
            raise ConfigurationError("missing OTP_SECRET")
