from __future__ import annotations
from datetime import datetime
from sqlalchemy import Boolean, Column, String, DateTime, Integer, Text
from .db import Base


class Interview(Base):
	__tablename__ = "interviews"
	# Primary key is the 5-character join code
	code = Column(String(5), primary_key=True, index=True)
	app_id = Column(String(128), nullable=False, default="default-app-id")
	title = Column(String(256), nullable=False)
	curriculum_text = Column(Text, nullable=False, default="")
	pdf_url = Column(String(1024), nullable=True)
	teacher_id = Column(String(128), nullable=False, index=True)
	teacher_name = Column(String(256), nullable=True)
	teacher_email = Column(String(256), nullable=True)
	# Minutes; 0 means unlimited
	time_limit = Column(Integer, default=0, nullable=False)
	record_audio = Column(Boolean, default=False, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class InterviewTranscript(Base):
	__tablename__ = "interview_transcripts"
	# Client-generated document id, one per student attempt
	id = Column(String(64), primary_key=True)
	app_id = Column(String(128), nullable=False, default="default-app-id")
	interview_code = Column(String(5), nullable=False, index=True)
	student_id = Column(String(128), nullable=True)
	student_name = Column(String(256), nullable=True)
	student_email = Column(String(256), nullable=True)
	topic = Column(String(256), nullable=True)
	full_transcript = Column(Text, nullable=False, default="[]")  # JSON array of turns
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
