"""Extraction of tokens, compilers and errors from Codeforces submit pages.

Every assumption about the submit page markup lives in this module.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from cfsubmit.domain.exceptions import ParseError
from cfsubmit.domain.models import LanguageOption, SubmitPageData

_CSRF_PATTERNS = (
    re.compile(r"<meta[^>]+name=[\"']X-Csrf-Token[\"'][^>]+content=[\"']([^\"']+)[\"']", re.I),
    re.compile(r"name=[\"']csrf_token[\"'][^>]*value=[\"']([^\"']+)[\"']", re.I),
    re.compile(r"data-csrf=[\"']([^\"']+)[\"']", re.I),
)

_CLOUDFLARE_MARKERS = ("cf-please-wait", "checking your browser before accessing", "just a moment")

_RATE_LIMIT_MARKERS = ("too many", "too frequent", "too fast", "rate limit")
_DUPLICATE_MARKERS = ("submitted exactly the same", "exactly the same solution")

RATE_LIMIT_MESSAGE = "You are submitting too often, please wait a little before trying again."
DUPLICATE_MESSAGE = "You have submitted exactly the same code before."


def parse_submit_page(html: str) -> SubmitPageData:
    """
    Extract the anti-forgery token and compiler options from a submit page.

    Raises:
        ParseError: If the token cannot be located
    """
    soup = BeautifulSoup(html, "lxml")

    csrf_token = _extract_csrf_token(soup, html)
    if not csrf_token:
        raise ParseError("Could not find the CSRF token on the submit page, the session may have expired")

    page = SubmitPageData(
        csrf_token=csrf_token,
        ftaa=_input_value(soup, "ftaa"),
        bfaa=_input_value(soup, "bfaa"),
        options=_extract_options(soup),
    )
    logger.debug(f"Parsed submit page: {len(page.options)} compiler options")
    return page


def extract_language_options(html: str) -> list[LanguageOption]:
    """
    Extract the compiler dropdown from a submit page.

    Raises:
        ParseError: If the dropdown is missing or empty
    """
    options = _extract_options(BeautifulSoup(html, "lxml"))
    if not options:
        raise ParseError("Compiler list not found on the submit page")
    return options


def is_login_page(html: str) -> bool:
    """Whether Codeforces answered with its login form."""
    lowered = html.lower()
    if 'id="enterform"' in lowered or 'name="handleoremail"' in lowered:
        return True
    return 'href="/enter' in lowered and "logout" not in lowered


def is_cloudflare_challenge(html: str) -> bool:
    lowered = html.lower()
    return any(marker in lowered for marker in _CLOUDFLARE_MARKERS)


def is_submission_accepted_url(url: str) -> bool:
    """Codeforces redirects to the submissions list after a successful POST."""
    path = url.split("?", 1)[0].rstrip("/")
    return path.endswith("/my") or path.endswith("/status") or "my=on" in url


def extract_submit_error(html: str) -> Optional[str]:
    """Return the error Codeforces rendered on the submit form, if any."""
    soup = BeautifulSoup(html, "lxml")

    for span in soup.find_all("span", class_="error"):
        text = _normalize_text(span.get_text(" ", strip=True))
        if text:
            return text

    for div in soup.find_all("div", class_="alert"):
        classes = div.get("class") or []
        if any("danger" in cls or "error" in cls for cls in classes):
            text = _normalize_text(div.get_text(" ", strip=True))
            if text:
                return text

    lowered = html.lower()
    if any(marker in lowered for marker in _DUPLICATE_MARKERS):
        return DUPLICATE_MESSAGE
    if any(marker in lowered for marker in _RATE_LIMIT_MARKERS):
        return RATE_LIMIT_MESSAGE
    return None


def is_rate_limit_message(message: str) -> bool:
    lowered = message.lower()
    return message == RATE_LIMIT_MESSAGE or any(marker in lowered for marker in _RATE_LIMIT_MARKERS)


def _extract_csrf_token(soup: BeautifulSoup, html: str) -> Optional[str]:
    meta = soup.find("meta", attrs={"name": "X-Csrf-Token"})
    if isinstance(meta, Tag) and meta.get("content"):
        return str(meta["content"])

    value = _input_value(soup, "csrf_token")
    if value:
        return value

    # Fallback for pages where the token only appears in inline markup
    for pattern in _CSRF_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(1)
    return None


def _input_value(soup: BeautifulSoup, name: str) -> str:
    field = soup.find("input", attrs={"name": name})
    if isinstance(field, Tag):
        return str(field.get("value") or "")
    return ""


def _extract_options(soup: BeautifulSoup) -> list[LanguageOption]:
    select = soup.find("select", attrs={"name": "programTypeId"})
    if not isinstance(select, Tag):
        return []

    options = []
    for option in select.find_all("option"):
        value = str(option.get("value") or "").strip()
        text = _normalize_text(option.get_text(" ", strip=True))
        if value and text:
            options.append(LanguageOption(id=value, display_text=text))
    return options


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
