"""
Client for the external run-daily function (collect -> score -> draft).

The function is opaque: this module only invokes it with the caller's bearer
token and classifies the outcome. An "Onboarding incomplete" / MISSING_* reply
is an expected, user-actionable condition and is raised as OnboardingIncomplete;
anything else that is not a 2xx becomes RemoteUnavailable.
"""
import logging
import re
from typing import Any

import requests

from app.config import settings
from app.core.errors import OnboardingIncomplete, RemoteUnavailable

logger = logging.getLogger(__name__)

ONBOARDING_MARKER = "Onboarding incomplete"
_MISSING_CODE = re.compile(r"\bMISSING_([A-Z_]+)\b")


def _error_text(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or ""
    if isinstance(body, dict):
        parts = [str(body.get(k)) for k in ("error", "message", "code", "detail") if body.get(k)]
        return " ".join(parts)
    return str(body)


def parse_onboarding_signal(text: str) -> list[str] | None:
    """Missing profile parts named by the trigger, or None if `text` is not an onboarding signal."""
    codes = [c.lower() for c in _MISSING_CODE.findall(text or "")]
    if codes:
        return list(dict.fromkeys(codes))
    if ONBOARDING_MARKER.lower() in (text or "").lower():
        return []
    return None


def _require_url() -> str:
    url = (settings.pipeline_trigger_url or "").strip()
    if not url:
        raise RemoteUnavailable("Pipeline trigger URL is not configured")
    return url


def trigger_pipeline(access_token: str) -> dict[str, Any]:
    """Run collection, scoring and drafting for the token's user. Returns the function's JSON reply."""
    url = _require_url()
    try:
        resp = requests.post(
            url,
            json={},
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=settings.remote_timeout_seconds,
        )
    except requests.RequestException as e:
        logger.warning("Pipeline trigger unreachable: %s", e)
        raise RemoteUnavailable("Pipeline function is unreachable. Please retry.") from e

    if resp.ok:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        logger.info("Pipeline trigger succeeded: status=%d", resp.status_code)
        return data if isinstance(data, dict) else {"result": data}

    text = _error_text(resp)
    missing = parse_onboarding_signal(text)
    if missing is not None:
        logger.info("Pipeline trigger refused, onboarding incomplete: missing=%s", missing)
        raise OnboardingIncomplete(ONBOARDING_MARKER, missing=missing)
    logger.warning("Pipeline trigger failed: status=%d body=%s", resp.status_code, text[:300])
    raise RemoteUnavailable(f"Pipeline run failed (HTTP {resp.status_code})")


def probe_pipeline() -> str:
    """Reachability check that never starts a run. Returns a short status message."""
    url = _require_url()
    try:
        resp = requests.options(url, timeout=min(settings.remote_timeout_seconds, 10.0))
    except requests.RequestException as e:
        raise RemoteUnavailable(f"Pipeline function unreachable: {e}") from e
    if resp.status_code >= 500:
        raise RemoteUnavailable(f"Pipeline function returned HTTP {resp.status_code}")
    return "Edge function reachable"
