import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_mcp import FastApiMCP

import config
from errors import register_error_handlers
from mongo import ensure_indexes, get_db
from routes import appointment_routes, auth_routes, patient_routes

logger = logging.getLogger(__name__)

# API operations exposed as MCP tools
MCP_OPERATIONS = [
    "register_doctor",
    "login_doctor",
    "list_patients",
    "add_patient",
    "update_patient",
    "delete_patient",
    "list_appointments",
    "book_appointment",
    "update_appointment",
    "delete_appointment",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes(get_db())
        logger.info("MongoDB connected, indexes ready")
    except Exception as e:
        logger.error(f"MongoDB connection failed: {str(e)}")
        raise
    yield


def create_app(mcp_enabled=None) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not config.JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not set")

    app = FastAPI(title="Clinic Management API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth_routes.router)
    app.include_router(patient_routes.router)
    app.include_router(appointment_routes.router)

    @app.get("/", operation_id="health_check")
    def health_check():
        return {"message": "Clinic Management API is running!"}

    if mcp_enabled is None:
        mcp_enabled = config.MCP_ENABLED
    if mcp_enabled:
        mcp = FastApiMCP(app, include_operations=MCP_OPERATIONS)
        mcp.mount_http()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT)
