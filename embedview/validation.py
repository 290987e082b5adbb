"""Structural URL checks for the embed target.

Only absolute http/https URLs with a usable host are accepted. Nothing here
touches the network: reachability is left to the frame itself.
"""

import re
from urllib.parse import urlsplit

WEB_SCHEMES = frozenset({"http", "https"})

# Characters a browser refuses inside a (non-IPv6) host name
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s#%/:<>?@\[\\\]^|]")


def parse_target(raw_input: str | None) -> str | None:
    """Return the URL to embed, or None if the text is not an acceptable target."""
    candidate = (raw_input or "").strip()
    if not candidate:
        return None

    try:
        parts = urlsplit(candidate)
        # .port raises for non-numeric or out-of-range ports
        parts.port
    except ValueError:
        return None

    if parts.scheme.lower() not in WEB_SCHEMES:
        return None

    host = parts.hostname
    if not host:
        return None
    # Bracketed IPv6 literals are already checked by urlsplit
    if "[" not in parts.netloc and _FORBIDDEN_HOST_CHARS.search(host):
        return None

    return candidate


def validate(raw_input: str | None) -> bool:
    """True if the text parses as an absolute http(s) URL."""
    return parse_target(raw_input) is not None
