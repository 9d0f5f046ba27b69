"""Lifespan dependency injection bridge.

``inject`` lets the FastAPI lifespan declare ``Depends()`` parameters
the same way a route handler does, so the Mongo client and the webhook
HTTP client are each built by their own generator dependency and torn down in
reverse order on shutdown.

Based on https://github.com/fastapi/fastapi/discussions/11742
"""

from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.utils import get_dependant, solve_dependencies

_LIFESPAN_SCOPE_HEADER = (b"X-Request-Scope", b"lifespan")

# Exit stacks FastAPI expects on the scope when solving generator deps.
_ASTACK_SCOPE_KEYS = (
    "fastapi_astack",
    "fastapi_inner_astack",
    "fastapi_function_astack",
)


def get_app(request: Request) -> FastAPI:
    """Lifespan dependency -- returns the ``FastAPI`` application."""
    return request.app


def _lifespan_request(app: FastAPI) -> Request:
    """Synthetic request used only to resolve lifespan dependencies."""
    return Request(
        scope={
            "type": "http",
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/",
            "raw_path": b"/",
            "query_string": b"",
            "root_path": "",
            "headers": (_LIFESPAN_SCOPE_HEADER,),
            "client": ("localhost", 80),
            "server": ("localhost", 80),
            "state": app.state,
            "app": app,
        }
    )


def inject(
    lifespan: Callable[..., Any],
) -> Callable[[FastAPI], Any]:
    """Resolve ``Depends()`` parameters for a lifespan function.

    Usage::

        @inject
        async def lifespan(
            app: FastAPI,
            _mongo: Annotated[None, Depends(build_mongo)],
        ):
            yield

    ``app.dependency_overrides`` is respected, so tests can replace
    ``build_mongo`` or ``build_relay_client`` with in-memory fakes.
    """

    @asynccontextmanager
    async def wrapper(app: FastAPI):  # type: ignore[misc]
        dependant = get_dependant(path="/", call=partial(lifespan, app))
        request = _lifespan_request(app)

        async with AsyncExitStack() as stack:
            for key in _ASTACK_SCOPE_KEYS:
                request.scope[key] = stack
            solved = await solve_dependencies(
                request=request,
                dependant=dependant,
                async_exit_stack=stack,
                embed_body_fields=False,
                dependency_overrides_provider=app,
            )
            async with asynccontextmanager(lifespan)(app, **solved.values):
                yield

    return wrapper
