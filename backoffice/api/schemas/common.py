"""Common schemas for the back office API."""

from fastapi.responses import JSONResponse

from backoffice.core.results import ActionResult


def envelope(result: ActionResult, success_status: int = 200) -> JSONResponse:
    """Render a service result, mirroring its failure code in the HTTP status."""
    status_code = success_status if result.success else result.status_code
    return JSONResponse(status_code=status_code, content=result.to_response())
