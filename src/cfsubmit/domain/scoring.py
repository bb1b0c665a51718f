"""Heuristic matching of compiler labels against a language family."""

import re
from typing import Optional, Sequence

from loguru import logger

from cfsubmit.domain.models import LanguageKey, LanguageOption

_SIXTY_FOUR_BIT = re.compile(r"64[\s-]?bit|x64|win64")
_CPP_STANDARD = re.compile(r"\+\+\s*(\d{2})(?!\d)")
_PYTHON_MAJOR = re.compile(r"(?:python|pypy)\s*(\d)")
_JAVA_VERSION = re.compile(r"(?:java|jdk)\s*(\d{1,2})(?!\d)")

CPP_STANDARD_BONUS = {"23": 5, "20": 4, "17": 3, "11": 1}
JAVA_VERSION_BONUS = {"21": 4, "17": 3, "11": 2}


def score_option(display_text: str, language_key: LanguageKey | str) -> int:
    """Score how well a compiler label fits the requested language family."""
    key = LanguageKey(language_key) if not isinstance(language_key, LanguageKey) else language_key
    text = display_text.lower()

    if key is LanguageKey.CPP:
        return _score_cpp(text)
    if key is LanguageKey.PYTHON:
        return _score_python(text)
    if key is LanguageKey.JAVA:
        return _score_java(text)
    return 0


def _score_cpp(text: str) -> int:
    score = 0
    if "c++" in text or "g++" in text:
        score += 6
    if "gnu" in text:
        score += 3
    standard = _CPP_STANDARD.search(text)
    if standard:
        score += CPP_STANDARD_BONUS.get(standard.group(1), 0)
    if _SIXTY_FOUR_BIT.search(text):
        score += 1
    if "clang" in text:
        score -= 4
    if "mingw" in text:
        score -= 2
    return score


def _score_python(text: str) -> int:
    score = 0
    if "python" in text or "pypy" in text:
        score += 6
    major = _PYTHON_MAJOR.search(text)
    if major and major.group(1) == "3":
        score += 4
    if "pypy" in text:
        score += 2
    if _SIXTY_FOUR_BIT.search(text):
        score += 1
    if major and major.group(1) == "2":
        score -= 8
    return score


def _score_java(text: str) -> int:
    score = 0
    if "java" in text:
        score += 6
    version = _JAVA_VERSION.search(text)
    if version:
        score += JAVA_VERSION_BONUS.get(version.group(1), 0)
    if "openjdk" in text or "jdk" in text:
        score += 1
    return score


def pick_recommended(
    options: Sequence[LanguageOption], language_key: LanguageKey | str
) -> Optional[LanguageOption]:
    """
    Pick the best compiler for a language family.

    The first option wins ties. Returns None for an empty list.
    """
    if not options:
        return None

    best = max(options, key=lambda option: score_option(option.display_text, language_key))
    logger.debug(f"Recommended compiler for {language_key}: {best.display_text} ({best.id})")
    return best
