import asyncio
import random
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tutorbot.db import Base, get_db
from tutorbot.main import app
from tutorbot.student.machine import InterviewMachine
from tutorbot.student.phrases import TransitionPhraseSupplier
from tutorbot.student.playback import AudioPlayback
from tutorbot.student.session import InterviewSession, SessionContext, StudentIdentity
from tutorbot.student.speech import SpeechCapture
from tutorbot.student.transcript import TranscriptRecorder

# base64 for b"ABC"
AUDIO_B64 = "QUJD"


class FakeRecognizer:
	"""Recognizer that starts and ends synchronously; tests feed it speech."""

	def __init__(self, available=True):
		self.available = available
		self.capture = None
		self.starts = 0
		self.stops = 0
		self.fail_with = None

	def start(self):
		if self.fail_with is not None:
			raise self.fail_with
		self.starts += 1
		self.capture.handle_start()

	def stop(self):
		self.stops += 1
		self.capture.handle_end()

	def say(self, *chunks):
		for chunk in chunks:
			self.capture.handle_result(chunk, is_final=False)
			self.capture.handle_result(chunk, is_final=True)


class FakePlayer:
	def __init__(self):
		self.played = []
		self.fail_with = None
		self.gate = None

	async def play(self, audio, on_started):
		on_started()
		if self.gate is not None:
			await self.gate.wait()
		if self.fail_with is not None:
			raise self.fail_with
		self.played.append(audio)


class FakeSynthesizer:
	def __init__(self):
		self.spoken = []
		self.cancels = 0
		self.fail_with = None

	async def speak(self, text, on_started):
		on_started()
		if self.fail_with is not None:
			raise self.fail_with
		self.spoken.append(text)

	def cancel(self):
		self.cancels += 1


class FakeBackend:
	def __init__(self, replies=None):
		self.replies = list(replies or [])
		self.calls = []
		self.synthesized = []
		self.saved = []
		self.audio = AUDIO_B64
		self.fail_with = None
		self.gate = None

	async def chat(self, history, message, system_prompt):
		self.calls.append({"history": history, "message": message, "system_prompt": system_prompt})
		if self.gate is not None:
			await self.gate.wait()
		if self.fail_with is not None:
			raise self.fail_with
		if self.replies:
			return self.replies.pop(0)
		return "What else can you tell me?"

	async def synthesize(self, text):
		self.synthesized.append(text)
		return self.audio

	async def save_transcript(self, doc_id, document):
		self.saved.append((doc_id, document))


def make_session(time_limit=0, code="HJK23"):
	return InterviewSession(
		code=code,
		title="The Giver",
		interviewer_name="Ms. Rivera",
		curriculum_text="Phase 1: Who is Jonas?",
		time_limit=time_limit,
	)


@pytest.fixture
def harness():
	def build(time_limit=0, replies=None, available=True, seed=7):
		backend = FakeBackend(replies)
		recognizer = FakeRecognizer(available=available)
		capture = SpeechCapture(recognizer if available else None)
		recognizer.capture = capture
		player = FakePlayer()
		synthesizer = FakeSynthesizer()
		session = make_session(time_limit)
		student = StudentIdentity("stu-1", "Sam Lee", "sam@example.com")
		context = SessionContext(
			session=session,
			student=student,
			recorder=TranscriptRecorder(backend, session, student, doc_id="doc-1"),
			phrases=TransitionPhraseSupplier(rng=random.Random(seed)),
		)
		notices = []
		machine = InterviewMachine(
			context,
			backend,
			capture,
			AudioPlayback(player, synthesizer),
			on_notice=lambda title, message: notices.append((title, message)),
		)
		return SimpleNamespace(
			machine=machine,
			context=context,
			backend=backend,
			recognizer=recognizer,
			capture=capture,
			player=player,
			synthesizer=synthesizer,
			notices=notices,
		)
	return build


@pytest.fixture
def run():
	return asyncio.run


@pytest.fixture
def db_session():
	engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
	db = TestingSession()
	try:
		yield db
	finally:
		db.close()
		engine.dispose()


@pytest.fixture
def client(db_session):
	def _get_db():
		yield db_session

	app.dependency_overrides[get_db] = _get_db
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()
