import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import Base, engine, get_db, ensure_schema
from .cleanup import purge_stale_transcripts
from .settings import settings
from .routers import health, gemini
from .routers import speech
from .routers import interviews

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger("tutorbot")

app = FastAPI(title="TutorBot API")
app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_methods=["GET", "POST", "PUT", "OPTIONS"],
	allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(gemini.router)
app.include_router(speech.router)
app.include_router(interviews.router)

@app.get("/info")
def root():
	return {
		"status": "ok",
		"environment": settings.environment,
		"gemini_configured": bool(settings.gemini_api_key),
	}

def _purge_once() -> None:
	db = next(get_db())
	try:
		purge_stale_transcripts(db, settings.transcript_retention_days)
	finally:
		db.close()

async def _cleanup_watcher():
	# Startup already ran one pass; repeat daily
	while True:
		await asyncio.sleep(24 * 60 * 60)
		try:
			_purge_once()
		except Exception as e:
			logger.warning("Transcript purge failed: %s", e)

@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
	# Apply lightweight dev migrations
	try:
		ensure_schema()
	except Exception as e:
		logger.warning("Schema check failed: %s", e)
	if settings.transcript_retention_days > 0:
		try:
			_purge_once()
		except Exception as e:
			logger.warning("Transcript purge failed: %s", e)
		asyncio.create_task(_cleanup_watcher())
