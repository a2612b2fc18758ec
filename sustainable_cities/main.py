import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sustainable_cities.core.config import settings
from sustainable_cities.core.db import init_models
from sustainable_cities.core.middleware import RateLimitMiddleware
from sustainable_cities.modules.auth.router import router as auth_router
from sustainable_cities.modules.reports.router import router as reports_router
from sustainable_cities.modules.forum.router import router as forum_router
from sustainable_cities.modules.invites.router import router as invites_admin_router
from sustainable_cities.modules.invites.router import public_router as invites_router
from sustainable_cities.modules.admin.router import router as admin_router
from sustainable_cities.modules.notifications.router import router as notifications_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

@app.on_event("startup")
async def startup_event():
    if settings.AUTO_CREATE_TABLES:
        await init_models()
        logger.info("Database tables created")

@app.get("/")
def root():
    return {"message": "Welcome to the Sustainable Cities API", "docs": "/docs"}

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    RateLimitMiddleware,
    limit_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    auth_limit_per_minute=settings.AUTH_RATE_LIMIT_PER_MINUTE,
)

app.include_router(auth_router, prefix=f"{settings.API_V1_STR}/auth", tags=["auth"])
app.include_router(reports_router, prefix=f"{settings.API_V1_STR}/reports", tags=["reports"])
app.include_router(forum_router, prefix=f"{settings.API_V1_STR}/forum", tags=["forum"])
app.include_router(invites_router, prefix=f"{settings.API_V1_STR}/invites", tags=["invites"])
app.include_router(invites_admin_router, prefix=f"{settings.API_V1_STR}/admin/invites", tags=["admin"])
app.include_router(admin_router, prefix=f"{settings.API_V1_STR}/admin", tags=["admin"])
app.include_router(notifications_router, prefix=f"{settings.API_V1_STR}/notifications", tags=["notifications"])
