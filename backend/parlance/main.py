import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import init_db
from .logging_setup import configure_logging
from .settings import settings
from .routers import audio, conversation, health, live

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Parlance API")
app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_methods=["*"],
	allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(conversation.router)
app.include_router(live.router)
app.include_router(audio.router)


@app.on_event("startup")
async def startup_event():
	init_db()
	logger.info("Parlance API started")
