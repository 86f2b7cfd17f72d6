"""Lookup of method and event signatures in the 4byte directory."""

from __future__ import annotations

import json
import urllib.parse
import urllib.request

FOUR_BYTE_URL = "https://www.4byte.directory"


def _get(path: str) -> str:
    with urllib.request.urlopen(FOUR_BYTE_URL + path) as response:
        data = response.read()
    payload = json.loads(data)
    results = payload.get("results") or [] if isinstance(payload, dict) else []
    if not results:
        return ""
    return results[0].get("text_signature", "")


def resolve(signature: str) -> str:
    """Return the text signature for a hex selector, or an empty string if unknown."""
    return _get("/api/v1/signatures/?hex_signature=" + urllib.parse.quote(signature))


def resolve_bytes(data: bytes) -> str:
    """Return the text signature for a selector given as bytes."""
    return resolve(bytes(data).hex())