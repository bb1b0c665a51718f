"""Cookie stores: in-memory, JSON file and HTTP cookie jar adapter."""

import json
import time
from http.cookiejar import Cookie as JarCookie
from http.cookiejar import CookieJar
from pathlib import Path
from typing import Iterable, Optional, Protocol

from loguru import logger

from cfsubmit.domain.models import Cookie
from cfsubmit.domain.models.cookies import CODEFORCES_DOMAIN


class CookieStoreProtocol(Protocol):
    """Protocol for a cookie store."""

    def get_cookies(self, domain: str = CODEFORCES_DOMAIN) -> list[Cookie]:
        """Return live cookies whose domain matches."""
        ...

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        """Install cookies, replacing any with the same domain, path and name."""
        ...


class MemoryCookieStore:
    """Cookie store living only as long as the process (ephemeral session)."""

    def __init__(self, cookies: Optional[Iterable[Cookie]] = None):
        self._cookies: dict[tuple[str, str, str], Cookie] = {}
        if cookies:
            self.set_cookies(cookies)

    def get_cookies(self, domain: str = CODEFORCES_DOMAIN) -> list[Cookie]:
        now = time.time()
        return [c for c in self._cookies.values() if c.matches_domain(domain) and not c.is_expired(now)]

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        for cookie in cookies:
            self._cookies[cookie.key] = cookie

    def __len__(self) -> int:
        return len(self._cookies)


class FileCookieStore(MemoryCookieStore):
    """Cookie store persisted as JSON (persistent browser session)."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = path
        self._load()

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        super().set_cookies(cookies)
        self._save()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            super().set_cookies(Cookie(**item) for item in data)
            logger.debug(f"Loaded {len(self)} cookies from {self.path}")
        except (json.JSONDecodeError, OSError, TypeError) as e:
            logger.warning(f"Ignoring unreadable cookie file {self.path}: {e}")

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [
            {
                "name": c.name,
                "value": c.value,
                "domain": c.domain,
                "path": c.path,
                "expires": c.expires,
                "secure": c.secure,
            }
            for c in self._cookies.values()
        ]
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


class CookieJarStore:
    """Adapter exposing an ``http.cookiejar.CookieJar`` as a cookie store.

    Used for the cookie jar of the HTTP client session.
    """

    def __init__(self, jar: CookieJar):
        self.jar = jar

    def get_cookies(self, domain: str = CODEFORCES_DOMAIN) -> list[Cookie]:
        now = time.time()
        cookies = [
            Cookie(
                name=c.name,
                value=c.value or "",
                domain=c.domain,
                path=c.path,
                expires=float(c.expires) if c.expires is not None else None,
                secure=c.secure,
            )
            for c in self.jar
        ]
        return [c for c in cookies if c.matches_domain(domain) and not c.is_expired(now)]

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        for cookie in cookies:
            self.jar.set_cookie(_to_jar_cookie(cookie))


def _to_jar_cookie(cookie: Cookie) -> JarCookie:
    return JarCookie(
        version=0,
        name=cookie.name,
        value=cookie.value,
        port=None,
        port_specified=False,
        domain=cookie.domain,
        domain_specified=True,
        domain_initial_dot=cookie.domain.startswith("."),
        path=cookie.path,
        path_specified=True,
        secure=cookie.secure,
        expires=int(cookie.expires) if cookie.expires is not None else None,
        discard=cookie.expires is None,
        comment=None,
        comment_url=None,
        rest={},
    )
