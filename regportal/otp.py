# regportal/otp.py
# Stateless email OTP: codes are derived from (email, secret, time window) with
# HMAC-SHA256 and recomputed on verification, so nothing is ever stored.

import hashlib
import hmac
import logging
import time
from typing import Optional, Union

from .errors import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 300
DEFAULT_TOLERANCE_WINDOWS = 1
DIGITS = 6
_HEX_PREFIX = 6

Secret = Union[str, bytes]

def _secret_bytes(secret: Optional[Secret]) -> bytes:
    if not secret:
        raise ConfigurationError("OTP secret is not configured")
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return bytes(secret)

def current_window_index(now: Optional[int] = None,
                         window_seconds: int = DEFAULT_WINDOW_SECONDS) -> int:
    if window_seconds <= 0:
        raise ValueError("window_seconds must be positive")
    if now is None:
        now = int(time.time())
    return int(now) // window_seconds

def derive_code(identity: str, secret: Secret, window_index: int) -> str:
    """Return the 6-digit code for ``identity`` in ``window_index``.

    The HMAC message is ``<identity>-<secret>-<window_index>`` keyed by the
    secret. The first six hex digits of the digest are taken mod 10**6.
    """
    key = _secret_bytes(secret)
    if not identity:
        raise ValueError("identity must be a non-empty string")
    msg = b"-".join((identity.encode("utf-8"), key, str(int(window_index)).encode("ascii")))
    digest = hmac.new(key, msg, hashlib.sha256).hexdigest()
    code_int = int(digest[:_HEX_PREFIX], 16) % (10 ** DIGITS)
    return str(code_int).zfill(DIGITS)

def code_for_now(identity: str, secret: Secret, now: Optional[int] = None,
                 window_seconds: int = DEFAULT_WINDOW_SECONDS) -> str:
    return derive_code(identity, secret, current_window_index(now, window_seconds))

def matching_window_offset(identity: str, secret: Secret, submitted,
                           now: Optional[int] = None,
                           window_seconds: int = DEFAULT_WINDOW_SECONDS,
                           tolerance_windows: int = DEFAULT_TOLERANCE_WINDOWS) -> Optional[int]:
    """How many windows back ``submitted`` was issued, or None if it is not accepted.

    ``now`` is read once so the current and prior windows always come from the
    same instant. Future windows are never checked.
    """
    if tolerance_windows < 0:
        raise ValueError("tolerance_windows must not be negative")
    key = _secret_bytes(secret)
    if not isinstance(submitted, str) or len(submitted) != DIGITS \
            or not (submitted.isascii() and submitted.isdigit()):
        return None
    if now is None:
        now = int(time.time())
    current = current_window_index(now, window_seconds)
    for back in range(tolerance_windows + 1):
        expected = derive_code(identity, key, current - back)
        if hmac.compare_digest(expected.encode("ascii"), submitted.encode("ascii")):
            return back
    return None

def verify_code(identity: str, secret: Secret, submitted,
                now: Optional[int] = None,
                window_seconds: int = DEFAULT_WINDOW_SECONDS,
                tolerance_windows: int = DEFAULT_TOLERANCE_WINDOWS) -> bool:
    offset = matching_window_offset(identity, secret, submitted, now=now,
                                    window_seconds=window_seconds,
                                    tolerance_windows=tolerance_windows)
    if offset is None:
        return False
    log.debug("OTP for %s matched %d window(s) back", identity, offset)
    return True
