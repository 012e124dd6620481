# storeadmin/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
import uvicorn

from . import auth, dashboard, pages, products
from .config import CORS_ORIGINS
from .database import engine, Base
from .logging_config import setup_logging
from .stores import StoreError

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Store Admin",
    description="Product management and dashboard API for shop administrators",
    version="1.0.0",
)

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ Роутеры; pages last, its catch-all would shadow the API otherwise
app.include_router(auth.router)
app.include_router(products.router)
app.include_router(dashboard.router)


# any store failure that escapes a handler or dependency
@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content="Internal server error")


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(pages.router)


@app.on_event("startup")
async def on_startup():
    # development convenience; deployments run the alembic migrations
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


# ✅ OpenAPI с OAuth2 (Authorize в /docs)
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schema["components"]["securitySchemes"]["OAuth2PasswordBearer"] = {
        "type": "oauth2",
        "flows": {"password": {"tokenUrl": "/api/auth/login", "scopes": {}}}
    }
    schema["security"] = [{"OAuth2PasswordBearer": []}]
    app.openapi_schema = schema
    return app.openapi_schema

app.openapi = custom_openapi


if __name__ == "__main__":
    uvicorn.run("storeadmin.main:app", host="0.0.0.0", port=8000, reload=True)
