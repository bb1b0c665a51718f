"""Infrastructure layer: HTTP, Codeforces API, HTML parsing and local storage."""

from .codeforces_client import CodeforcesApiClient
from .cookie_store import CookieJarStore, CookieStoreProtocol, FileCookieStore, MemoryCookieStore
from .http_client import AsyncHTTPClient, HTTPResponse
from .state_store import JsonStateStore

__all__ = [
    "AsyncHTTPClient",
    "CodeforcesApiClient",
    "CookieJarStore",
    "CookieStoreProtocol",
    "FileCookieStore",
    "HTTPResponse",
    "JsonStateStore",
    "MemoryCookieStore",
]
