"""Content generation API router.

These endpoints are called straight from browsers on any origin, so every
response carries permissive CORS headers and pre-flight requests get an
empty 200. The app-wide CORS middleware skips the /functions prefix.
"""

from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ophelia_market.common.exceptions import ContentServiceError, ValidationFailedError
from ophelia_market.common.schemas import ErrorResponse
from ophelia_market.content.service import ContentService
from ophelia_market.deps import ServiceContainer

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

router = APIRouter(
    prefix="/functions",
    responses={code: {"model": ErrorResponse} for code in (400, 402, 429, 500)},
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        ErrorResponse(error=message).model_dump(), status_code=status_code, headers=CORS_HEADERS,
    )


async def _run(
    request: Request,
    operation: Callable[[ContentService, dict[str, Any]], Awaitable[dict[str, Any]]],
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Request body must be JSON")
    if not isinstance(body, dict):
        return _error(400, "Request body must be a JSON object")

    services: ServiceContainer = request.app.state.services
    try:
        result = await operation(services.content, body)
    except ValidationFailedError as e:
        return _error(400, e.message)
    except ContentServiceError as e:
        return _error(e.status_code, e.message)
    return JSONResponse(result, headers=CORS_HEADERS)


@router.options("/{function_name}")
async def preflight(function_name: str):
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/enhance-product-description")
async def enhance_product_description(request: Request):
    return await _run(request, lambda svc, body: svc.enhance_description(body))


@router.post("/generate-product-story")
async def generate_product_story(request: Request):
    return await _run(request, lambda svc, body: svc.generate_story(body))


@router.post("/generate-marketing-content")
async def generate_marketing_content(request: Request):
    return await _run(request, lambda svc, body: svc.generate_marketing(body))
