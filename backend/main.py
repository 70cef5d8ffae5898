# backend/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db
from utils.catalog_cache import CatalogCache
from utils.catalog_store import fetch_all_products

# Router imports
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.admin import router as admin_router
from routes.admin_products import router as admin_products_router
from routes.customers import router as customers_router
from routes.orders import router as orders_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

# Initialization
init_db()

app = FastAPI(title="Storefront Catalog API", version="1.0.0")

# Product snapshot for the catalog query engine, owned by this app instance
app.state.catalog_cache = CatalogCache(fetch_all_products, ttl_seconds=settings.CATALOG_CACHE_TTL_SECONDS)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(admin_router)
app.include_router(admin_products_router)
app.include_router(customers_router)
app.include_router(orders_router)

logger.info("Storefront Catalog API ready (catalog cache TTL %ss)", settings.CATALOG_CACHE_TTL_SECONDS)

@app.get("/")
def read_root():
    return {"message": "Storefront Catalog API is running"}
