from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_PROXIES = (
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
)


@dataclass(frozen=True)
class Settings:
    # Stats feed
    BASE_URL: str = "https://bsm.baseball-softball.de"
    CLUB_ID: int = 492

    # Proxy prefixes tried in order after a direct fetch fails; the target URL
    # is appended URL-encoded
    PROXIES: tuple[str, ...] = DEFAULT_PROXIES

    # Per-request timeout (seconds)
    TIMEOUT: float = 30.0

    def with_overrides(self, **kwargs: object) -> "Settings":
        return replace(self, **kwargs)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from BSM_BASE_URL, CLUB_ID, FETCH_PROXIES and FETCH_TIMEOUT."""
        overrides: dict[str, object] = {}
        if os.environ.get("BSM_BASE_URL"):
            overrides["BASE_URL"] = os.environ["BSM_BASE_URL"].rstrip("/")
        if os.environ.get("CLUB_ID"):
            overrides["CLUB_ID"] = int(os.environ["CLUB_ID"])
        if "FETCH_PROXIES" in os.environ:
            raw = os.environ["FETCH_PROXIES"]
            overrides["PROXIES"] = tuple(p.strip() for p in raw.split(",") if p.strip())
        if os.environ.get("FETCH_TIMEOUT"):
            overrides["TIMEOUT"] = float(os.environ["FETCH_TIMEOUT"])
        return cls(**overrides)
