"""Response error extraction for load test observability.

Parses checkout API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- HTTP errors (403/404/400): {"detail": "msg"}
- Checkout errors (400/409): {"error": "msg"} or {"error": {"pane.field": ["msg", ...]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    detail = body.get("detail")
    if isinstance(detail, list):
        parts = []
        for err in detail:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)
    if isinstance(detail, str):
        return detail

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(
                f"{field}: {'; '.join(messages) if isinstance(messages, list) else messages}"
                for field, messages in error.items()
            )
        return str(error)

    return str(body)[:300]


def landed_step(response: Response) -> str | None:
    """Return the checkout step a followed redirect ended on, if any."""
    path = response.url.rstrip("/").split("?")[0]
    if "/checkout/" not in path:
        return None
    parts = path.split("/checkout/", 1)[1].split("/")
    return parts[1] if len(parts) > 1 else None
