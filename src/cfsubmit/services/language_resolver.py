"""Service for choosing the compiler to submit with."""

from typing import Optional, Sequence

from loguru import logger

from cfsubmit.domain.exceptions import AuthError, CloudflareChallengeError, ParseError
from cfsubmit.domain.models import LanguageKey, LanguageOption, ProblemIdentifier
from cfsubmit.domain.scoring import pick_recommended
from cfsubmit.infrastructure.interfaces import HTTPClientProtocol
from cfsubmit.infrastructure.parsers import (
    extract_language_options,
    is_cloudflare_challenge,
    is_login_page,
)
from cfsubmit.infrastructure.state_store import JsonStateStore

BASE_URL = "https://codeforces.com"


def build_submit_url(problem: ProblemIdentifier, base_url: str = BASE_URL) -> str:
    return f"{base_url}/contest/{problem.contest_id}/submit?submittedProblemIndex={problem.index}"


def build_problem_url(problem: ProblemIdentifier, base_url: str = BASE_URL) -> str:
    return f"{base_url}/contest/{problem.contest_id}/problem/{problem.index}"


async def fetch_submit_page(
    http_client: HTTPClientProtocol, problem: ProblemIdentifier, base_url: str = BASE_URL
) -> str:
    """
    Load the submit page of a problem.

    Raises:
        CloudflareChallengeError: If Cloudflare intercepted the request
        AuthError: If Codeforces answered with the login form
    """
    url = build_submit_url(problem, base_url)
    logger.debug(f"Loading submit page: {url}")

    html = await http_client.get_text(url, headers={"Referer": build_problem_url(problem, base_url)})
    if is_cloudflare_challenge(html):
        raise CloudflareChallengeError(
            "Cloudflare verification required, open Codeforces in the browser and retry"
        )
    if is_login_page(html):
        raise AuthError("Not logged in to Codeforces")
    return html


class LanguageResolver:
    """Fetches compiler options and picks one for a language family."""

    def __init__(
        self,
        http_client: HTTPClientProtocol,
        preferences: Optional[JsonStateStore] = None,
        base_url: str = BASE_URL,
    ):
        self.http_client = http_client
        self.preferences = preferences or JsonStateStore()
        self.base_url = base_url

    async def fetch_language_options(self, problem: ProblemIdentifier) -> list[LanguageOption]:
        """
        Compiler options offered on the submit page of a problem.

        Raises:
            NetworkError: On connectivity problems
            ParseError: If the page has no compiler list, including the login wall
        """
        try:
            html = await fetch_submit_page(self.http_client, problem, self.base_url)
        except AuthError as e:
            raise ParseError(f"Compiler list for {problem} is behind the login page") from e
        options = extract_language_options(html)
        logger.info(f"Fetched {len(options)} compiler options for {problem}")
        return options

    def pick_recommended(
        self, options: Sequence[LanguageOption], language_key: LanguageKey | str
    ) -> Optional[LanguageOption]:
        return pick_recommended(options, language_key)

    def choose(
        self,
        problem: ProblemIdentifier,
        options: Sequence[LanguageOption],
        language_key: LanguageKey | str,
    ) -> Optional[LanguageOption]:
        """
        Pick a compiler, preferring the one used last time for this problem.

        The remembered choice is only reused while the page still offers it.
        """
        key = LanguageKey(language_key)
        preference_key = self._preference_key(problem, key)

        preferred_id = self.preferences.get(preference_key)
        if preferred_id:
            for option in options:
                if option.id == preferred_id:
                    logger.debug(f"Reusing preferred compiler {option.display_text} for {problem}")
                    return option

        chosen = pick_recommended(options, key)
        if chosen is not None:
            self.preferences.set(preference_key, chosen.id)
        return chosen

    @staticmethod
    def _preference_key(problem: ProblemIdentifier, language_key: LanguageKey) -> str:
        return f"program-type:{problem.cache_key}-{language_key.value}"
