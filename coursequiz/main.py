from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursequiz.core.config import settings
from coursequiz.core.logging_config import setup_logging
from coursequiz.db.models import Base
from coursequiz.db.session import engine
from coursequiz.api.routes import api_router

setup_logging()

# Create the DB tables (no migrations yet)
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
def root():
    return {"message": "Welcome to the Course Quiz Platform API"}
