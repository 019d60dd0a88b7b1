import logging
from typing import Callable

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPIError
from pydantic import BaseModel

from ..tts_client import synthesize_base64

router = APIRouter(tags=["speech"])

logger = logging.getLogger("tutorbot.speech")


class SpeechRequest(BaseModel):
	text: str | None = None


def get_synthesizer() -> Callable[[str], str]:
	return synthesize_base64


# Plain def: the Cloud TTS client is synchronous, FastAPI runs this in its threadpool
@router.post("/generateSpeech")
def generate_speech(req: SpeechRequest, synthesize: Callable[[str], str] = Depends(get_synthesizer)):
	if not req.text:
		return JSONResponse(status_code=400, content={"error": "Missing 'text' field in request body."})
	try:
		audio_content = synthesize(req.text)
	except GoogleAPIError as e:
		logger.error("TTS error: %s", e)
		return JSONResponse(status_code=500, content={"error": "An internal server error occurred."})
	except Exception as e:
		logger.error("TTS failed: %s", e)
		return JSONResponse(status_code=500, content={"error": "An internal server error occurred."})
	return {"audioContent": audio_content}
