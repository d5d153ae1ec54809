"""
Wizard state persistence in signed cookies.

Between requests the state of an in-progress wizard travels in a cookie
signed with HMAC-SHA256, so it cannot be altered client-side. Tampered
or expired cookies read as "no state" and the wizard starts over.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import time

from pydantic import ValidationError

from formflow.wizard.controller import WizardState

logger = logging.getLogger(__name__)

# 24-hour cookie expiry
DEFAULT_MAX_AGE = 86400


def cookie_name(wizard_name: str) -> str:
    """Return the cookie name for a given wizard."""
    return f"ff-wizard-{wizard_name}"


def _signature(payload: bytes, secret_key: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def sign_state(state: WizardState, secret_key: str) -> str:
    """Serialize and sign a WizardState for cookie storage.

    Returns:
        Base64-encoded payload (no padding) with HMAC-SHA256 signature appended.
    """
    payload = state.model_dump_json().encode("utf-8")
    b64_payload = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    return f"{b64_payload}.{_signature(payload, secret_key)}"


def verify_state(
    raw: str | None,
    secret_key: str,
    max_age: int = DEFAULT_MAX_AGE,
) -> WizardState | None:
    """Verify signature and deserialize a WizardState from a cookie.

    Returns:
        WizardState if valid, None if missing, tampered or expired.
    """
    if not raw or "." not in raw:
        return None

    b64_payload, sig = raw.rsplit(".", 1)
    # Re-add padding for base64 decode
    padded = b64_payload + "=" * (-len(b64_payload) % 4)
    try:
        payload = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return None

    if not hmac.compare_digest(sig, _signature(payload, secret_key)):
        logger.warning("Wizard state cookie signature mismatch (tamper detected)")
        return None

    try:
        state = WizardState.model_validate_json(payload)
    except ValidationError:
        return None

    if time.time() - state.started_at > max_age:
        logger.warning("Wizard state cookie expired")
        return None

    return state
