"""Uniform response envelope.

Every endpoint answers with `{success: true, data}` or
`{success: false, error, details?}` as application/json.
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from domain.model.errors import DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content={'success': True, 'data': jsonable_encoder(data)},
        status_code=status_code,
    )


def error_response(error: str, status_code: int, details: str | None = None) -> JSONResponse:
    content: dict[str, Any] = {'success': False, 'error': error}
    if details is not None:
        content['details'] = details
    return JSONResponse(content=content, status_code=status_code)


async def respond(
    call: Awaitable[T],
    failure: str,
    to_data: Callable[[T], Any],
    status_code: int = 200,
) -> JSONResponse:
    """Await a service call and wrap its outcome in the envelope.

    ValidationError → 400 with its message, NotFoundError → 404, any other
    DomainError → 500 with `failure` as the error and the cause as details.
    """
    try:
        result = await call
    except ValidationError as e:
        return error_response(str(e), 400)
    except NotFoundError as e:
        return error_response(str(e), 404)
    except DomainError as e:
        logger.error(failure, extra={"error": str(e)})
        return error_response(failure, 500, details=str(e))
    return success_response(to_data(result), status_code)
