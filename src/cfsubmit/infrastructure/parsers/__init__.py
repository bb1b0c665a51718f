"""Parsers for extracting data from Codeforces pages."""

from .submit_page_parser import (
    extract_language_options,
    extract_submit_error,
    is_cloudflare_challenge,
    is_login_page,
    is_rate_limit_message,
    is_submission_accepted_url,
    parse_submit_page,
)

__all__ = [
    "extract_language_options",
    "extract_submit_error",
    "is_cloudflare_challenge",
    "is_login_page",
    "is_rate_limit_message",
    "is_submission_accepted_url",
    "parse_submit_page",
]
