"""Litestar application factory."""

from typing import Optional

from litestar import Litestar, Request, Response
from litestar.datastructures import State
from litestar.di import Provide
from litestar.status_codes import (
    HTTP_401_UNAUTHORIZED,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)
from loguru import logger

from cfsubmit.api.dependencies import provide_workflow
from cfsubmit.api.routes import ProblemController, SessionController, SubmissionController
from cfsubmit.domain.exceptions import (
    ApiError,
    AuthError,
    NetworkError,
    ParseError,
    SubmissionError,
    SubmissionRejected,
)
from cfsubmit.services.workflow import SubmissionWorkflow

ERROR_STATUS = {
    AuthError: HTTP_401_UNAUTHORIZED,
    SubmissionRejected: HTTP_409_CONFLICT,
    ParseError: HTTP_422_UNPROCESSABLE_ENTITY,
    NetworkError: HTTP_502_BAD_GATEWAY,
    ApiError: HTTP_502_BAD_GATEWAY,
    SubmissionError: HTTP_500_INTERNAL_SERVER_ERROR,
}


def handle_submission_error(request: Request, exc: SubmissionError) -> Response:
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        HTTP_500_INTERNAL_SERVER_ERROR,
    )
    logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return Response(
        content={"error": type(exc).__name__, "detail": str(exc)},
        status_code=status_code,
    )


def create_app(workflow: Optional[SubmissionWorkflow] = None) -> Litestar:
    """Build the API around a workflow (created from settings when omitted)."""
    if workflow is None:
        from cfsubmit.config import configure_logging, load_settings
        from cfsubmit.services import create_workflow

        settings = load_settings()
        configure_logging(settings.log_level)
        workflow = create_workflow(settings)

    async def close_workflow(app: Litestar) -> None:
        await app.state.workflow.close()

    return Litestar(
        route_handlers=[ProblemController, SessionController, SubmissionController],
        dependencies={"workflow": Provide(provide_workflow, sync_to_thread=False)},
        exception_handlers={SubmissionError: handle_submission_error},
        state=State({"workflow": workflow}),
        on_shutdown=[close_workflow],
    )
