import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from app.api.activities import router as activities_router
from app.api.goals import router as goals_router
from app.api.routes import router as routes_router
from app.api.users import router as users_router
from app.db import Base, engine
from app.models.user import User  # noqa: F401  (import ensures table is registered)
from app.models.route import RunningRoute  # noqa: F401
from app.models.activity import RunningActivity  # noqa: F401
from app.models.goal import Goal  # noqa: F401
from app.core.config import settings


# Replace loguru's default sink so the level follows settings
logger.remove()
logger.add(sys.stderr, level=settings.log_level)

app = FastAPI(title="Running Tracker")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (users, routes, activities, goals) on startup
Base.metadata.create_all(bind=engine)

app.include_router(users_router)
app.include_router(routes_router)
app.include_router(activities_router)
app.include_router(goals_router)


@app.get("/")
def root():
    return {"message": "Running tracker backend is running"}
