from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import configure_logging, settings
from core.database import check_connection, init_db
from core.errors import register_exception_handlers
from routes import admin, auth, feedback, inventory, meals, proxy, recipes, reviews, shopping, stores, units, users

log = logging.getLogger("kitchen_pal.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initiera databasen vid start
    init_db()
    log.info("Kitchen Pal started")
    yield


configure_logging()

app = FastAPI(title="Kitchen Pal", debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

# Routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(stores.router, prefix="/api/stores", tags=["stores"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["inventory"])
app.include_router(recipes.router, prefix="/api/recipes", tags=["recipes"])
app.include_router(reviews.router, prefix="/api", tags=["reviews"])
app.include_router(shopping.router, prefix="/api/shopping", tags=["shopping"])
app.include_router(meals.router, prefix="/api/meals", tags=["meals"])
app.include_router(feedback.router, prefix="/api/feedback", tags=["feedback"])
app.include_router(units.router, prefix="/api/units", tags=["units"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(proxy.router, tags=["proxy"])


@app.get("/health")
def health_check() -> dict[str, str]:
    """Hälso-kontroll; svarar alltid 200 men rapporterar databasstatus."""
    try:
        check_connection()
        database = "connected"
    except (sqlite3.Error, OSError):
        log.warning("Health check could not reach the database", exc_info=True)
        database = "disconnected"
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="127.0.0.1", port=8000, reload=True)
