"""Rate-limit key composition and client IP extraction."""

from __future__ import annotations

from collections.abc import Sequence

KEY_SEPARATOR = ":"

# Checked in header order; first match wins.
_CLIENT_IP_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


def provider_from_key(key: str) -> str:
    """Return the part of ``key`` before the first separator (whole key if none)."""
    return key.partition(KEY_SEPARATOR)[0]


class KeyGenerator:
    """Builds ``provider:identifier`` keys for the rate limiter."""

    def generate_key(self, provider: str, identifier: str) -> str:
        return f"{provider}{KEY_SEPARATOR}{identifier}"

    def extract_client_ip(self, headers: Sequence[tuple[str, str]]) -> str | None:
        for name, value in headers:
            lowered = name.lower()
            if lowered not in _CLIENT_IP_HEADERS:
                continue
            if lowered == "x-forwarded-for":
                # Leftmost entry is the originating client
                first = value.split(",")[0].strip()
                return first or None
            return value.strip() or None
        return None
