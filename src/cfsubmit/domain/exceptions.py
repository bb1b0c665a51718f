"""Exception taxonomy for the submission flow."""


class SubmissionError(Exception):
    """Base error for every failure surfaced by this package."""

    pass


class NetworkError(SubmissionError):
    """Connectivity problem, timeout, or HTTP failure after retries."""

    pass


class CloudflareChallengeError(NetworkError):
    """The request was intercepted by a Cloudflare browser check."""

    pass


class ParseError(SubmissionError, ValueError):
    """Expected page structure is absent."""

    pass


class AuthError(SubmissionError):
    """No valid Codeforces session."""

    pass


class SubmissionRejected(SubmissionError):
    """Codeforces refused the submitted payload."""

    pass


class RateLimitedError(SubmissionRejected):
    """Codeforces asked us to slow down."""

    pass


class ApiError(SubmissionError):
    """Codeforces JSON API answered with a FAILED envelope."""

    def __init__(self, comment: str):
        super().__init__(comment)
        self.comment = comment
