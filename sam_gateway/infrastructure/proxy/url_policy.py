"""Allow-list policy for proxied document URLs."""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit


@dataclass(frozen=True)
class DocumentUrlPolicy:
    """
    Accept only ``https://<allowed_host><path_prefix>...`` URLs.

    The host must match exactly: no case folding, trailing dot, port or
    userinfo. Paths may not contain ``.`` or ``..`` segments, encoded or not,
    nor percent-encoded slashes or backslashes.

    Examples:
        >>> policy = DocumentUrlPolicy("app.fagg-afmps.be", "/pharma-status/api/files/")
        >>> policy.is_allowed("https://app.fagg-afmps.be/pharma-status/api/files/123")
        True
        >>> policy.is_allowed("https://APP.fagg-afmps.be/pharma-status/api/files/123")
        False
    """

    allowed_host: str
    path_prefix: str

    def is_allowed(self, url: str) -> bool:
        if not url or not url.startswith("https://"):
            return False
        if any(char.isspace() or ord(char) < 0x20 for char in url) or "\\" in url:
            return False
        try:
            parts = urlsplit(url)
        except ValueError:
            return False

        if parts.scheme != "https" or parts.netloc != self.allowed_host:
            return False
        if not parts.path.startswith(self.path_prefix):
            return False

        lowered = parts.path.lower()
        if "%2f" in lowered or "%5c" in lowered:
            return False
        for segment in parts.path.split("/"):
            decoded = unquote(segment)
            if decoded in (".", "..") or "/" in decoded or "\\" in decoded:
                return False
        return True
