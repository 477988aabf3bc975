"""
Mapping from handler results to HTTP responses.

- Redirect -> 303 See Other with a Location header
- State -> JSON body with the given status code
"""

from typing import Union

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse

from invoicing.schemas.results import Redirect, State


def redirect_response(redirect: Redirect) -> RedirectResponse:
    """303 so the browser follows with a GET after a form POST."""
    return RedirectResponse(url=redirect.route, status_code=status.HTTP_303_SEE_OTHER)


def state_response(
    state: State, status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=state.model_dump(exclude_none=True),
    )


def result_response(
    result: Union[State, Redirect]
) -> Union[JSONResponse, RedirectResponse]:
    if isinstance(result, Redirect):
        return redirect_response(result)
    return state_response(result)
