"""
HTMX-aware response utilities.

Live recomputation and wizard navigation may arrive as HTMX requests;
these helpers read the HX-* request headers and build responses with
HX-* headers for the client.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from fastapi.responses import HTMLResponse


@dataclass(frozen=True, slots=True)
class HtmxDetails:
    """Parsed HTMX request headers."""

    is_htmx: bool = False
    current_url: str = ""
    target: str = ""
    trigger_name: str = ""

    @classmethod
    def from_request(cls, request: Any) -> HtmxDetails:
        """Construct from a Starlette/FastAPI request."""
        if not hasattr(request, "headers"):
            return cls()
        h = request.headers
        return cls(
            is_htmx=h.get("HX-Request") == "true",
            current_url=h.get("HX-Current-URL", ""),
            target=h.get("HX-Target", ""),
            trigger_name=h.get("HX-Trigger-Name", ""),
        )


def _encode_trigger(triggers: dict[str, Any] | list[str]) -> str:
    if isinstance(triggers, list):
        return ", ".join(triggers)
    return json.dumps(triggers)


def htmx_response(
    content: str,
    *,
    status_code: int = 200,
    triggers: dict[str, Any] | list[str] | None = None,
    redirect: str | None = None,
) -> HTMLResponse:
    """Create an HTMLResponse with HTMX headers.

    Args:
        content: HTML body content.
        status_code: HTTP status code (default 200).
        triggers: Events to fire on the client via HX-Trigger.
        redirect: URL to redirect the client to via HX-Redirect.
    """
    headers: dict[str, str] = {}
    if triggers:
        headers["HX-Trigger"] = _encode_trigger(triggers)
    if redirect:
        headers["HX-Redirect"] = redirect
    return HTMLResponse(content=content, status_code=status_code, headers=headers)


def is_htmx_request(request: Any) -> bool:
    """Check if the incoming request is from HTMX."""
    return HtmxDetails.from_request(request).is_htmx
