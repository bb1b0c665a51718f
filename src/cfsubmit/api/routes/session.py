"""API routes for the Codeforces session."""

from litestar import Controller, get
from litestar.status_codes import HTTP_200_OK

from cfsubmit.api.schemas.submission import HandleResponse
from cfsubmit.services.workflow import SubmissionWorkflow


class SessionController(Controller):
    """Controller for login state."""

    path = "/session"

    @get("/handle", status_code=HTTP_200_OK)
    async def get_handle(self, workflow: SubmissionWorkflow) -> HandleResponse:
        handle = workflow.current_handle()
        return HandleResponse(handle=handle, logged_in=handle is not None)
