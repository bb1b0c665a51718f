"""Explicit holder of the cookie stores that make up a Codeforces session."""

import re
from typing import Iterable, Optional

from cfsubmit.domain.models import Cookie
from cfsubmit.domain.models.cookies import CODEFORCES_DOMAIN
from cfsubmit.infrastructure.cookie_store import CookieStoreProtocol

AUTH_COOKIE = "X-User"
HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,24}$")


class SessionContext:
    """Browser-side cookie stores plus the native HTTP cookie store.

    The browser side has a persistent and an ephemeral store; ``use_ephemeral``
    selects which one is active, like a private browsing toggle.
    """

    def __init__(
        self,
        persistent_store: CookieStoreProtocol,
        ephemeral_store: CookieStoreProtocol,
        native_store: CookieStoreProtocol,
        use_ephemeral: bool = False,
    ):
        self.persistent_store = persistent_store
        self.ephemeral_store = ephemeral_store
        self.native_store = native_store
        self.use_ephemeral = use_ephemeral

    @property
    def embedded_store(self) -> CookieStoreProtocol:
        return self.ephemeral_store if self.use_ephemeral else self.persistent_store

    @property
    def other_embedded_store(self) -> CookieStoreProtocol:
        return self.persistent_store if self.use_ephemeral else self.ephemeral_store

    def get_cookies(self, domain: str = CODEFORCES_DOMAIN) -> list[Cookie]:
        return self.embedded_store.get_cookies(domain)

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        self.embedded_store.set_cookies(cookies)

    def current_handle(self) -> Optional[str]:
        return handle_from_cookies(self.embedded_store.get_cookies(CODEFORCES_DOMAIN))


def handle_from_cookies(cookies: Iterable[Cookie]) -> Optional[str]:
    """
    Read the logged-in handle from the auth cookie.

    When several auth cookies exist the one expiring last wins; a session
    cookie (no expiry) counts as expiring last.
    """
    candidates = [c for c in cookies if c.name == AUTH_COOKIE and c.matches_domain(CODEFORCES_DOMAIN)]
    if not candidates:
        return None

    chosen = max(candidates, key=lambda c: float("inf") if c.expires is None else c.expires)
    handle = chosen.value.strip()
    return handle if HANDLE_PATTERN.match(handle) else None
