from typing import Any, Dict, List, Optional
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from arkiart import config
from arkiart.base_service import BaseService, ServiceError, error_details
from arkiart.database import create_engine, create_session_factory, init_db
from arkiart.auth.middleware import authenticate_user
from arkiart.auth.router import router as auth_router

# Create shared base service instance
base_service = BaseService("main")

# Dependencies reported as middlewares in the endpoint listing
GATES = {authenticate_user}


def list_endpoints(app: FastAPI, routers: List[APIRouter]) -> List[Dict[str, Any]]:
    """
    Describe every API route: path, methods and the gates guarding it.

    Included routers are walked directly; depending on the FastAPI release
    ``app.routes`` either flattens them or keeps them as a single entry.
    """
    endpoints = []
    seen = set()
    routes = list(app.routes)
    for router in routers:
        routes.extend(router.routes)
    for route in routes:
        if not isinstance(route, APIRoute):
            continue
        key = (route.path, tuple(sorted(route.methods)))
        if key in seen:
            continue
        seen.add(key)
        middlewares = [
            dependency.call.__name__
            for dependency in route.dependant.dependencies
            if dependency.call in GATES
        ]
        endpoints.append({
            "path": route.path,
            "methods": sorted(route.methods),
            "middlewares": middlewares,
        })
    return endpoints


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database_url: SQLAlchemy async URL; defaults to DATABASE_URL from the environment
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for FastAPI.
        Owns the database engine for the life of the process.
        """
        engine = create_engine(database_url or config.get_database_url())
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        try:
            await init_db(engine)
        except Exception as e:
            base_service.log_error(e, context="Database initialization")
            await engine.dispose()
            raise

        base_service.log_event("service.startup", {"service": "auth"})
        yield

        base_service.log_event("service.shutdown", {"service": "auth"})
        await engine.dispose()

    app = FastAPI(
        title="ArkiArt Auth API",
        description="Username/password authentication with bearer access tokens",
        version="0.1.0",
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return exc.to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return base_service.failure(
            "Invalid request body",
            status_code=status.HTTP_400_BAD_REQUEST,
            response="Invalid request body",
            error=error_details(exc),
        )

    @app.get("/", tags=["root"])
    async def root():
        """List the available endpoints."""
        return list_endpoints(app, [auth_router])

    app.include_router(auth_router)

    return app


app = create_app()
