from typing import Any


def validate_payload(payload: Any) -> bool:
    """
    Shallow structural check for an incoming payload.
    Accepts a JSON object carrying a non-blank string `url`.
    Never raises; anything else is simply rejected.
    """
    if not isinstance(payload, dict):
        return False

    url = payload.get("url")
    return isinstance(url, str) and bool(url.strip())
