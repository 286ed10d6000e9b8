import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from app.core.config import Config
from app.db.database import init_db
from app.exceptions import (
    create_exception_handler,
    product_validation_exception_handler,
    InvalidTokenException,
    PermissionRequiredException,
    ProductValidationException,
    ResolutionException,
    StoreUnavailableException,
    StoreWriteException,
    UserNotFoundException,
)
from app.middleware.auth_middleware import CustomAuthMiddleWare
from app.routers.admin import router as admin_router
from app.routers.catalog import router as catalog_router
from app.services import CatalogCache

logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

api_version = "v1"
swagger_docs_url = f"/api/{api_version}/docs"
redoc_docs_url = f"/api/{api_version}/redoc"
openapi_url = f"/api/{api_version}/openapi.json"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(
    docs_url=swagger_docs_url,
    redoc_url=redoc_docs_url,
    openapi_url=openapi_url,
    title="Storefront Catalog API",
    description="Catalog and product administration API for the storefront.",
    version="1.0.0",
    lifespan=lifespan,
)

# Category lists used to resolve names in the product form
app.state.catalog_cache = CatalogCache(ttl_seconds=Config.CATALOG_CACHE_TTL)

# Add CORS middleware first
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'],
    allow_headers=["*"],
)

# Add custom auth middleware after CORS (order matters!)
app.add_middleware(CustomAuthMiddleWare)    # custom authentication middleware

# Register endpoints
app.include_router(admin_router, prefix=f'/api/{api_version}/admin', tags=["Admin"])
app.include_router(catalog_router, prefix=f'/api/{api_version}', tags=["Catalog"])


# Add a root endpoint for health check
@app.get("/")
async def root():
    return {
        "message": "Storefront Catalog API",
        "version": "1.0.0",
        "docs": f"https://{Config.DOMAIN}{swagger_docs_url}",
        "status": "running"
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# Register custom exceptions

# Auth-related exception handlers
app.add_exception_handler(InvalidTokenException, create_exception_handler(401, "Invalid or expired token provided!"))
app.add_exception_handler(PermissionRequiredException, create_exception_handler(403, "Forbidden: Admin access required"))
app.add_exception_handler(UserNotFoundException, create_exception_handler(401, "User not found."))

# Catalog write exception handlers
app.add_exception_handler(ProductValidationException, product_validation_exception_handler)
app.add_exception_handler(ResolutionException, create_exception_handler(400))
app.add_exception_handler(StoreUnavailableException, create_exception_handler(503))
app.add_exception_handler(StoreWriteException, create_exception_handler(500))
