from fastapi import Request

from visionary.services.session import GenerationSession
from visionary.services.storage import LocalStorage


def get_session(request: Request) -> GenerationSession:
    """The session controller created in the application lifespan."""
    return request.app.state.session


def get_storage(request: Request) -> LocalStorage:
    return request.app.state.storage
