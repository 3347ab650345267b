"""Master module - dynamic route aggregator for FastAPI."""

from collections.abc import Mapping
from importlib.metadata import entry_points
from typing import Callable, cast

from fastapi import APIRouter
from loguru import logger

from .common.job_repository import JobRepository
from .common.job_storage import JobStorage
from .common.user import UserLike

ROUTES_GROUP = "bizlogo_tools.routes"

# Type alias for route factory functions loaded from entry points
RouteFactory = Callable[
    [JobRepository, JobStorage, Callable[[], UserLike | None]],
    APIRouter,
]


def get_route_factories() -> dict[str, RouteFactory]:
    """Load route factories registered under the ``bizlogo_tools.routes`` group.

    Raises:
        RuntimeError: If a plugin fails to load (missing dependency, etc.)
    """
    factories: dict[str, RouteFactory] = {}
    for ep in entry_points(group=ROUTES_GROUP):
        try:
            factories[ep.name] = cast(RouteFactory, ep.load())
        except Exception as e:
            raise RuntimeError(f"Failed to load plugin '{ep.name}': {e}") from e
    return factories


def create_master_router(
    repository: JobRepository,
    file_storage: JobStorage,
    get_current_user: Callable[[], UserLike | None],
    route_factories: Mapping[str, RouteFactory] | None = None,
) -> APIRouter:
    """Aggregate all plugin routes into one router.

    Args:
        repository: JobRepository implementation for job persistence
        file_storage: JobStorage implementation for uploaded and exported files
        get_current_user: Callable dependency for authentication.
                          Should return user object or None.
        route_factories: Optional explicit factories; discovered from entry
                         points when None.

    Returns:
        Combined APIRouter with all plugin routes

    Example:
        from fastapi import FastAPI
        from bizlogo_tools import LocalFileStorage, create_master_router

        app = FastAPI()
        repository = SQLiteJobRepository("./jobs.db")
        file_storage = LocalFileStorage("./media")

        async def get_current_user():
            return None

        app.include_router(
            create_master_router(repository, file_storage, get_current_user),
            prefix="/api",
        )
    """
    master = APIRouter()
    factories = route_factories if route_factories is not None else get_route_factories()

    for name, create_router in factories.items():
        try:
            plugin_router = create_router(repository, file_storage, get_current_user)
        except Exception as e:
            raise RuntimeError(f"Failed to create routes for plugin '{name}': {e}") from e
        master.include_router(plugin_router)
        logger.debug(f"Mounted routes for plugin '{name}'")

    return master
