"""Keeps browser cookies and native HTTP cookies in step."""

import asyncio
from typing import Awaitable, Callable, Optional

from loguru import logger

from cfsubmit.domain.models.cookies import CODEFORCES_DOMAIN

from .polling import BackoffPolicy, poll_until
from .session import SessionContext, handle_from_cookies


class CookieBridge:
    """Copies Codeforces cookies between the stores of a ``SessionContext``."""

    def __init__(self, context: SessionContext, domain: str = CODEFORCES_DOMAIN):
        self.context = context
        self.domain = domain

    def sync_from_embedded_to_native(self) -> int:
        """Install browser cookies into the native store. Returns how many were copied."""
        cookies = self.context.embedded_store.get_cookies(self.domain)
        self.context.native_store.set_cookies(cookies)
        logger.debug(f"Synced {len(cookies)} cookies browser -> native")
        return len(cookies)

    def sync_from_native_to_embedded(self) -> int:
        """Install native cookies into the active browser store. Returns how many were copied."""
        cookies = self.context.native_store.get_cookies(self.domain)
        self.context.embedded_store.set_cookies(cookies)
        logger.debug(f"Synced {len(cookies)} cookies native -> browser")
        return len(cookies)

    def read_current_handle(self) -> Optional[str]:
        """Handle of the logged-in user, or None when not logged in."""
        return self.context.current_handle()

    def try_sync_other_store_if_needed(self) -> bool:
        """
        Recover a login made under the other browser session mode.

        If the active browser store has no auth cookie but the other one has,
        its Codeforces cookies are copied to the native store and from there
        into the active browser store.
        """
        if self.context.current_handle() is not None:
            return False

        other_cookies = self.context.other_embedded_store.get_cookies(self.domain)
        if handle_from_cookies(other_cookies) is None:
            return False

        self.context.native_store.set_cookies(other_cookies)
        self.sync_from_native_to_embedded()
        logger.info("Recovered Codeforces login from the other session store")
        return True

    async def wait_for_login(
        self,
        policy: BackoffPolicy = BackoffPolicy(),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> Optional[str]:
        """
        Re-check the login on a short backoff schedule.

        Cookie writes from a just-finished login can land late, so the first
        read may miss them.
        """

        async def check() -> Optional[str]:
            self.sync_from_embedded_to_native()
            self.try_sync_other_store_if_needed()
            return self.read_current_handle()

        outcome = await poll_until(check, lambda handle: handle is not None, policy, sleep=sleep)
        if outcome.satisfied:
            logger.info(f"Logged in to Codeforces as {outcome.value}")
        else:
            logger.debug("No Codeforces login detected")
        return outcome.value
