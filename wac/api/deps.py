from fastapi import Request

from ..context import AppContext


def get_context(request: Request) -> AppContext:
    """The `AppContext` built by the application lifespan."""
    return request.app.state.context
