import asyncio
import json

import httpx
import pytest

from tutorbot.codes import InvalidCodeError
from tutorbot.student.config import api_base_url_for
from tutorbot.student.errors import ProxyError, SessionNotFoundError
from tutorbot.student.proxy import BackendClient
from tutorbot.settings import Settings


def make_client(handler):
	return BackendClient("http://test", transport=httpx.MockTransport(handler))


def call(client, method, *args):
	async def scenario():
		try:
			return await getattr(client, method)(*args)
		finally:
			await client.aclose()
	return asyncio.run(scenario())


def test_fetch_session_normalizes_code():
	seen = []

	def handler(request):
		seen.append(request.url.path)
		return httpx.Response(200, json={
			"code": "HJK23",
			"title": "The Giver",
			"teacherName": "Ms. Rivera",
			"curriculumText": "Phase 1",
			"timeLimit": 10,
			"recordAudio": True,
		})

	session = call(make_client(handler), "fetch_session", " hjk23 ")
	assert seen == ["/interviews/HJK23"]
	assert session.time_limit == 10
	assert session.record_audio is True
	assert session.interviewer_name == "Ms. Rivera"


def test_unknown_code_is_distinct_error():
	def handler(request):
		return httpx.Response(404, json={"detail": "Invalid code. Please check with your teacher."})

	with pytest.raises(SessionNotFoundError) as exc:
		call(make_client(handler), "fetch_session", "ABCDE")
	assert str(exc.value).startswith("Invalid code")


def test_malformed_code_never_reaches_server():
	def handler(request):
		raise AssertionError("no request expected")

	with pytest.raises(InvalidCodeError):
		call(make_client(handler), "fetch_session", "ABC")


def test_chat_sends_contract_payload():
	bodies = []

	def handler(request):
		bodies.append(json.loads(request.content))
		return httpx.Response(200, json={"response": "Who is Jonas?"})

	history = [{"role": "user", "parts": [{"text": "I am ready to start."}]}]
	reply = call(make_client(handler), "chat", history, "Hello", "SYSTEM")
	assert reply == "Who is Jonas?"
	assert bodies == [{"history": history, "message": "Hello", "systemPrompt": "SYSTEM"}]


def test_chat_server_error_raises_proxy_error():
	def handler(request):
		return httpx.Response(500, text="quota exceeded")

	with pytest.raises(ProxyError) as exc:
		call(make_client(handler), "chat", [], "Hello", "SYSTEM")
	assert exc.value.status_code == 500
	assert "quota exceeded" in str(exc.value)


def test_chat_network_error_raises_proxy_error():
	def handler(request):
		raise httpx.ConnectError("refused", request=request)

	with pytest.raises(ProxyError):
		call(make_client(handler), "chat", [], "Hello", "SYSTEM")


def test_synthesize_returns_audio_or_none():
	def ok(request):
		return httpx.Response(200, json={"audioContent": "QUJD"})

	def broken(request):
		return httpx.Response(500, json={"error": "An internal server error occurred."})

	assert call(make_client(ok), "synthesize", "Hi") == "QUJD"
	assert call(make_client(broken), "synthesize", "Hi") is None


def test_save_transcript_puts_document():
	seen = []

	def handler(request):
		seen.append((request.method, request.url.path, json.loads(request.content)))
		return httpx.Response(200, json={"ok": True})

	call(make_client(handler), "save_transcript", "doc-1", {"interviewCode": "HJK23"})
	assert seen == [("PUT", "/transcripts/doc-1", {"interviewCode": "HJK23"})]


def test_base_url_follows_hostname():
	config = Settings(DEV_API_BASE_URL="http://dev", PROD_API_BASE_URL="https://prod")
	assert api_base_url_for("localhost", config) == "http://dev"
	assert api_base_url_for("127.0.0.1:5500", config) == "http://dev"
	assert api_base_url_for("ainterview.example.org", config) == "https://prod"


def test_student_errors_export_only_their_own_classes():
	from tutorbot.student import errors

	for name in errors.__all__:
		assert getattr(errors, name).__module__ == errors.__name__
