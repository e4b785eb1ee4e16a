import re
from dataclasses import dataclass


class UrlNormalizer:
    """Strategy interface."""
    def normalize(self, s: str) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class SchemePrefixUrlNormalizer(UrlNormalizer):
    default_scheme: str = "https"

    def normalize(self, s: str) -> str:
        s = (s or "").strip()
        if not s:
            return ""

        if re.match(r"^https?://", s, flags=re.IGNORECASE):
            return s

        return f"{self.default_scheme}://" + s
