"""FastAPI dependencies that hand route handlers their services."""

from typing import Annotated

from fastapi import Depends, Request

from forum_search.container import ServiceContainer
from forum_search.db.repository import ForumRepository
from forum_search.exceptions import ConfigurationError


def get_container(request: Request) -> ServiceContainer:
    """Return the container attached to the application state."""
    container: ServiceContainer | None = getattr(request.app.state, "container", None)
    if container is None:
        raise ConfigurationError("Services are not initialized")
    return container


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


def get_repository(container: ContainerDep) -> ForumRepository:
    # Writes go through the sync hook so the index follows the store.
    return container.repository


RepositoryDep = Annotated[ForumRepository, Depends(get_repository)]
