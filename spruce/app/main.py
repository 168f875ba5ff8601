# Spruce ERP lead pipeline backend entrypoint.

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spruce.app.api import activities
from spruce.app.api import directory
from spruce.app.api import leads
from spruce.app.api import pipeline
from spruce.app.api import tasks
from spruce.app.core.logging import configure_logging
from spruce.app.core.settings import get_settings
from spruce.app.db.seed import build_store

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    app.state.store = build_store(settings)
    yield


app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)

origins = [
    "http://localhost:9002",
    "http://127.0.0.1:9002",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(leads.router)
app.include_router(activities.router)
app.include_router(tasks.router)
app.include_router(pipeline.router)
app.include_router(directory.router)


@app.get("/")
def read_root():
    return {"app": "Spruce ERP backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}

