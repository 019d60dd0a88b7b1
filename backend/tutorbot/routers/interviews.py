"""
Interview Store Router
======================

Endpoints backing the student join flow and transcript persistence, plus the
teacher-side creation and deletion of interviews.

API Endpoints:
- POST /interviews: Create an interview and allocate its join code
- GET /interviews/{code}: Look up an interview session by join code
- PUT /transcripts/{doc_id}: Merge-upsert a student's transcript document
- POST /deleteInterviewAndTranscripts: Remove an interview and its transcripts
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from ..cleanup import InterviewOwnershipError, delete_interview_and_transcripts
from ..codes import InvalidCodeError, generate_code, normalize_code
from ..db import get_db
from ..models import Interview, InterviewTranscript
from ..settings import settings


router = APIRouter(tags=["interviews"])

logger = logging.getLogger("tutorbot.interviews")

NOT_FOUND_MESSAGE = "Invalid code. Please check with your teacher."

# Attempts at finding an unused join code before giving up
_CODE_ATTEMPTS = 20


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class CreateInterviewRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	title: str
	curriculum_text: str = Field(alias="curriculumText")
	teacher_id: str = Field(alias="teacherId")
	teacher_name: Optional[str] = Field(default=None, alias="teacherName")
	teacher_email: Optional[str] = Field(default=None, alias="teacherEmail")
	pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
	time_limit: int = Field(default=0, ge=0, alias="timeLimit")
	record_audio: bool = Field(default=False, alias="recordAudio")


class TurnPayload(BaseModel):
	role: str
	text: str
	timestamp: Optional[str] = None


class TranscriptUpsert(BaseModel):
	"""Partial transcript document; only fields that are present get merged."""
	model_config = ConfigDict(populate_by_name=True)

	interview_code: Optional[str] = Field(default=None, alias="interviewCode")
	student_id: Optional[str] = Field(default=None, alias="studentId")
	student_name: Optional[str] = Field(default=None, alias="studentName")
	student_email: Optional[str] = Field(default=None, alias="studentEmail")
	topic: Optional[str] = None
	full_transcript: Optional[List[TurnPayload]] = Field(default=None, alias="fullTranscript")


class DeleteRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	app_id: Optional[str] = Field(default=None, alias="appId")
	interview_id: Optional[str] = Field(default=None, alias="interviewId")
	teacher_id: Optional[str] = Field(default=None, alias="teacherId")


def _interview_payload(row: Interview) -> Dict[str, Any]:
	return {
		"code": row.code,
		"title": row.title,
		"teacherName": row.teacher_name or "Teacher",
		"curriculumText": row.curriculum_text,
		"timeLimit": row.time_limit or 0,
		"recordAudio": bool(row.record_audio),
		"pdfUrl": row.pdf_url,
	}


# ============================================================================
# API ENDPOINTS
# ============================================================================

@router.post("/interviews", status_code=201)
def create_interview(req: CreateInterviewRequest, db: Session = Depends(get_db)):
	title = (req.title or "").strip()
	if not title or not req.curriculum_text.strip():
		raise HTTPException(status_code=400, detail="title and curriculumText are required")
	for _ in range(_CODE_ATTEMPTS):
		code = generate_code()
		if db.get(Interview, code) is None:
			break
	else:
		raise HTTPException(status_code=503, detail="could not allocate a join code")
	row = Interview(
		code=code,
		app_id=settings.app_id,
		title=title,
		curriculum_text=req.curriculum_text,
		pdf_url=req.pdf_url,
		teacher_id=req.teacher_id,
		teacher_name=req.teacher_name,
		teacher_email=req.teacher_email,
		time_limit=req.time_limit,
		record_audio=req.record_audio,
	)
	db.add(row)
	db.commit()
	logger.info("Created interview %s for teacher %s", code, req.teacher_id)
	return {"code": code}


@router.get("/interviews/{code}")
def get_interview(code: str, db: Session = Depends(get_db)):
	try:
		code = normalize_code(code)
	except InvalidCodeError as e:
		raise HTTPException(status_code=400, detail=str(e))
	row = db.get(Interview, code)
	if row is None:
		raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
	return _interview_payload(row)


@router.put("/transcripts/{doc_id}")
def upsert_transcript(doc_id: str, req: TranscriptUpsert, db: Session = Depends(get_db)):
	row = db.get(InterviewTranscript, doc_id)
	if row is None:
		if not req.interview_code:
			raise HTTPException(status_code=400, detail="interviewCode is required for a new transcript")
		row = InterviewTranscript(id=doc_id, app_id=settings.app_id, interview_code=req.interview_code.upper())
	fields = req.model_dump(exclude_unset=True)
	if "interview_code" in fields and req.interview_code:
		row.interview_code = req.interview_code.upper()
	for name in ("student_id", "student_name", "student_email", "topic"):
		if name in fields:
			setattr(row, name, fields[name])
	if req.full_transcript is not None:
		row.full_transcript = json.dumps([turn.model_dump() for turn in req.full_transcript])
	db.add(row)
	db.commit()
	return {"ok": True}


@router.post("/deleteInterviewAndTranscripts")
def delete_interview(req: DeleteRequest, db: Session = Depends(get_db)):
	if not req.app_id or not req.interview_id or not req.teacher_id:
		raise HTTPException(status_code=400, detail="Missing fields: appId, interviewId or teacherId.")
	interview_id = req.interview_id.strip().upper()
	try:
		result = delete_interview_and_transcripts(db, interview_id, req.teacher_id)
	except InterviewOwnershipError as e:
		raise HTTPException(status_code=403, detail=str(e))
	except Exception as e:
		db.rollback()
		logger.error("Error deleting interview %s: %s", interview_id, e)
		raise HTTPException(status_code=500, detail="An internal server error occurred while trying to delete the interview.")
	return {
		"success": True,
		"message": f"Interview {interview_id} and transcripts deleted.",
		"deleted": result.transcripts_deleted,
	}
