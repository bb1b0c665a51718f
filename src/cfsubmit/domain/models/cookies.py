"""Cookie value object shared by every cookie store."""

from dataclasses import dataclass

CODEFORCES_DOMAIN = "codeforces.com"


@dataclass(frozen=True)
class Cookie:
    """A single HTTP cookie."""

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: float | None = None
    secure: bool = True

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.domain.lower(), self.path, self.name)

    def matches_domain(self, domain: str = CODEFORCES_DOMAIN) -> bool:
        own = self.domain.lower().lstrip(".")
        target = domain.lower().lstrip(".")
        return own == target or own.endswith("." + target)

    def is_expired(self, now: float) -> bool:
        return self.expires is not None and self.expires <= now
