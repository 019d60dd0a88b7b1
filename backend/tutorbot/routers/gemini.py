import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..gemini_client import GeminiClient

router = APIRouter(tags=["gemini"])

logger = logging.getLogger("tutorbot.gemini")


class Part(BaseModel):
	text: str = ""


class HistoryEntry(BaseModel):
	role: str
	parts: List[Part] = Field(default_factory=list)


class ChatRequest(BaseModel):
	history: List[HistoryEntry] = Field(default_factory=list)
	message: str
	system_prompt: str | None = Field(default=None, alias="systemPrompt")


async def get_gemini_client():
	try:
		client = GeminiClient()
	except ValueError as e:
		raise HTTPException(status_code=503, detail=str(e))
	try:
		yield client
	finally:
		await client.aclose()


@router.post("/getGeminiResponse")
async def get_gemini_response(req: ChatRequest, client: GeminiClient = Depends(get_gemini_client)):
	if not req.message.strip():
		raise HTTPException(status_code=400, detail="Missing 'message' field in request body.")
	try:
		history = [entry.model_dump() for entry in req.history]
		text = await client.chat(history, req.message, system_prompt=req.system_prompt)
		return {"response": text}
	except Exception as e:
		logger.error("Gemini call failed: %s", e)
		raise HTTPException(status_code=500, detail=str(e))
