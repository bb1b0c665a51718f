from typing import Optional

from cfsubmit.config import Settings, load_settings
from cfsubmit.services.cookie_bridge import CookieBridge
from cfsubmit.services.language_resolver import LanguageResolver
from cfsubmit.services.polling import BackoffPolicy, poll_until
from cfsubmit.services.session import SessionContext
from cfsubmit.services.status_poller import PollResult, PollState, StatusPoller
from cfsubmit.services.submission import SubmissionService, SubmitThrottle
from cfsubmit.services.workflow import SubmissionWorkflow


def create_workflow(settings: Optional[Settings] = None) -> SubmissionWorkflow:
    """Factory function to create the submission workflow with all dependencies."""
    from cfsubmit.infrastructure.codeforces_client import CodeforcesApiClient
    from cfsubmit.infrastructure.cookie_store import CookieJarStore, FileCookieStore, MemoryCookieStore
    from cfsubmit.infrastructure.http_client import AsyncHTTPClient
    from cfsubmit.infrastructure.state_store import JsonStateStore

    settings = settings or load_settings()

    # Create infrastructure dependencies
    http_client = AsyncHTTPClient(
        timeout=settings.request_timeout,
        max_attempts=settings.max_attempts,
        user_agent=settings.user_agent,
    )
    api_client = CodeforcesApiClient(
        http_client,
        min_interval=settings.api_min_interval,
        max_attempts=settings.max_attempts,
        base_url=f"{settings.base_url}/api",
    )
    state = JsonStateStore(settings.state_file)

    context = SessionContext(
        persistent_store=FileCookieStore(settings.cookie_file),
        ephemeral_store=MemoryCookieStore(),
        native_store=CookieJarStore(http_client.cookie_jar),
        use_ephemeral=settings.use_ephemeral,
    )
    bridge = CookieBridge(context)
    resolver = LanguageResolver(http_client, preferences=state, base_url=settings.base_url)

    return SubmissionWorkflow(
        http_client=http_client,
        api_client=api_client,
        cookie_bridge=bridge,
        language_resolver=resolver,
        submission_service=SubmissionService(
            http_client=http_client,
            cookie_bridge=bridge,
            language_resolver=resolver,
            history=state,
            throttle=SubmitThrottle(settings.submit_min_interval),
            base_url=settings.base_url,
        ),
        poller=StatusPoller(
            api_client,
            initial_delay=settings.poll_initial_delay,
            interval=settings.poll_interval,
            max_attempts=settings.poll_max_attempts,
            budget=settings.poll_budget,
        ),
    )


__all__ = [
    "BackoffPolicy",
    "CookieBridge",
    "LanguageResolver",
    "PollResult",
    "PollState",
    "SessionContext",
    "StatusPoller",
    "SubmissionService",
    "SubmissionWorkflow",
    "SubmitThrottle",
    "create_workflow",
    "poll_until",
]
