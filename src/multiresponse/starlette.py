"""Starlette integration.

Connects :class:`~multiresponse.payload.Payload` to Starlette's request
and response objects. :func:`install` validates the format
configuration when the application is assembled and registers the
handler that turns :class:`PayloadError` into a 400 response.

Examples
--------
.. code-block:: python

    from pydantic import BaseModel
    from starlette.applications import Starlette
    from starlette.routing import Route

    from multiresponse import Payload
    from multiresponse.starlette import install, payload_endpoint

    class Echo(BaseModel):
        foo: str = ""
        bar: int = 0

    @payload_endpoint(Echo)
    async def echo(payload: Payload[Echo]) -> Payload[Echo]:
        return payload

    app = Starlette(routes=[Route("/", echo, methods=["POST"])])
    install(app)
"""

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from .config.settings import Settings
from .config.settings import settings as default_settings
from .exceptions import PayloadError
from .media.types import FormatRegistry
from .payload import Payload, build_response, extract_payload

logger = logging.getLogger(__name__)

REGISTRY_STATE_KEY = "multiresponse_registry"


def _registry_for(
    request: Request, registry: Optional[FormatRegistry]
) -> Optional[FormatRegistry]:
    if registry is not None:
        return registry
    app = request.scope.get("app")
    if app is None:
        return None
    return getattr(app.state, REGISTRY_STATE_KEY, None)


async def read_payload(
    request: Request,
    model: Any,
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> Payload:
    """Extract a typed payload from a Starlette request.

    :param request: Incoming request
    :param model: Application type to decode into
    :return: Decoded payload
    :raises PayloadError: If the request cannot be decoded
    """
    return await extract_payload(
        request.headers,
        request.stream(),
        model,
        registry=_registry_for(request, registry),
        settings=settings,
    )


def payload_response(
    payload: Payload,
    request: Request,
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> Response:
    """Render a payload as the response to ``request``."""
    parts = build_response(
        payload,
        request.headers,
        registry=_registry_for(request, registry),
        settings=settings,
    )
    return Response(
        content=parts.body,
        status_code=parts.status_code,
        media_type=parts.media_type,
    )


async def payload_error_response(request: Request, exc: Exception) -> Response:
    """Exception handler mapping payload errors to plain-text responses."""
    status_code = getattr(exc, "status_code", 400)
    message = getattr(exc, "message", str(exc))
    return PlainTextResponse(message, status_code=status_code)


PayloadHandler = Callable[[Payload], Any]


def payload_endpoint(
    model: Any,
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> Callable[[PayloadHandler], Callable[[Request], Awaitable[Response]]]:
    """Turn a payload handler into a Starlette endpoint.

    The handler receives the decoded :class:`Payload` and may return a
    ``Payload``, a bare value (wrapped automatically) or a ready-made
    Starlette ``Response``. Sync and async handlers are both accepted.

    :param model: Application type of the request payload
    :return: Decorator producing a Starlette endpoint
    """

    def decorator(handler: PayloadHandler) -> Callable[[Request], Awaitable[Response]]:
        @functools.wraps(handler)
        async def endpoint(request: Request) -> Response:
            try:
                payload = await read_payload(
                    request, model, registry=registry, settings=settings
                )
            except PayloadError as e:
                return await payload_error_response(request, e)

            result = handler(payload)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, Response):
                return result
            if not isinstance(result, Payload):
                result = Payload(result)
            return payload_response(
                result, request, registry=registry, settings=settings
            )

        return endpoint

    return decorator


def install(
    app: Starlette,
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> FormatRegistry:
    """Validate the format configuration and wire it into ``app``.

    :param app: Starlette application
    :param registry: Optional registry; built from settings when omitted
    :param settings: Optional settings; the global settings when omitted
    :return: The registry stored on ``app.state``
    :raises ConfigurationError: If no format is enabled or the default
        format is not enabled
    """
    if registry is None:
        registry = FormatRegistry.from_settings(settings or default_settings)
    registry.validate()

    setattr(app.state, REGISTRY_STATE_KEY, registry)
    app.add_exception_handler(PayloadError, payload_error_response)
    logger.info(
        "Payload formats enabled: %s",
        ", ".join(f.value for f in registry.ordered()),
    )
    return registry


__all__ = [
    "read_payload",
    "payload_response",
    "payload_error_response",
    "payload_endpoint",
    "install",
]
