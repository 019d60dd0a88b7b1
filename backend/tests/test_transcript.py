import asyncio

from tutorbot.student.session import StudentIdentity
from tutorbot.student.transcript import TranscriptRecorder

from conftest import FakeBackend, make_session


class FailingStore:
	def __init__(self):
		self.attempts = 0

	async def save_transcript(self, doc_id, document):
		self.attempts += 1
		raise RuntimeError("store offline")


def make_recorder(store):
	return TranscriptRecorder(store, make_session(), StudentIdentity("stu-9", None, None), doc_id="doc-9")


def test_each_append_writes_full_turn_array():
	store = FakeBackend()
	recorder = make_recorder(store)

	async def scenario():
		recorder.append("model", "Question one?")
		recorder.append("USER", "Answer one.")
		await recorder.flush()

	asyncio.run(scenario())

	assert [len(doc["fullTranscript"]) for _, doc in store.saved] == [1, 2]
	last = store.saved[-1][1]
	assert last["fullTranscript"][1]["role"] == "user"
	assert last["studentName"] == "Anonymous"
	assert last["interviewCode"] == "HJK23"


def test_empty_text_is_not_recorded():
	store = FakeBackend()
	recorder = make_recorder(store)

	async def scenario():
		assert recorder.append("user", "") is None
		await recorder.flush()

	asyncio.run(scenario())

	assert len(recorder) == 0
	assert store.saved == []


def test_turns_are_a_copy():
	recorder = make_recorder(None)
	recorder.append("model", "Hello")
	recorder.turns.clear()
	assert len(recorder.turns) == 1


def test_store_failure_does_not_propagate():
	store = FailingStore()
	recorder = make_recorder(store)

	async def scenario():
		recorder.append("model", "Hello")
		await recorder.flush()

	asyncio.run(scenario())

	assert store.attempts == 1
	assert len(recorder) == 1


def test_append_outside_event_loop_keeps_turn():
	store = FakeBackend()
	recorder = make_recorder(store)
	recorder.append("model", "Hello")
	assert len(recorder) == 1
	assert store.saved == []


def test_generated_doc_id_is_unique():
	a = TranscriptRecorder(None, make_session(), StudentIdentity("s"))
	b = TranscriptRecorder(None, make_session(), StudentIdentity("s"))
	assert a.doc_id != b.doc_id
