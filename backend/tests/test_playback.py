import asyncio

import pytest

from tutorbot.student.playback import AudioPlayback

from conftest import AUDIO_B64, FakePlayer, FakeSynthesizer


class Counter:
	def __init__(self):
		self.calls = 0

	def __call__(self):
		self.calls += 1


@pytest.fixture
def parts():
	player = FakePlayer()
	synthesizer = FakeSynthesizer()
	return player, synthesizer, AudioPlayback(player, synthesizer)


def test_plays_payload_and_completes_once(parts):
	player, synthesizer, playback = parts
	done, started = Counter(), Counter()
	asyncio.run(playback.play(AUDIO_B64, "Hello", done, on_started=started))

	assert player.played == [b"ABC"]
	assert synthesizer.spoken == []
	assert synthesizer.cancels == 1
	assert done.calls == 1
	assert started.calls == 1


def test_null_payload_uses_local_voice(parts):
	player, synthesizer, playback = parts
	done = Counter()
	asyncio.run(playback.play(None, "Hello there", done))

	assert player.played == []
	assert synthesizer.spoken == ["Hello there"]
	assert done.calls == 1


def test_playback_error_still_completes(parts):
	player, synthesizer, playback = parts
	player.fail_with = RuntimeError("autoplay blocked")
	done = Counter()
	asyncio.run(playback.play(AUDIO_B64, "Hello", done))

	assert done.calls == 1


def test_fallback_error_still_completes(parts):
	player, synthesizer, playback = parts
	synthesizer.fail_with = RuntimeError("no voices")
	done = Counter()
	asyncio.run(playback.play(None, "Hello", done))

	assert done.calls == 1


def test_undecodable_payload_falls_back(parts):
	player, synthesizer, playback = parts
	done = Counter()
	asyncio.run(playback.play("not base64!!", "Hello", done))

	assert player.played == []
	assert synthesizer.spoken == ["Hello"]
	assert done.calls == 1


def test_missing_continuation_is_allowed(parts):
	player, synthesizer, playback = parts
	asyncio.run(playback.play(AUDIO_B64, "Hello", None))
	assert player.played == [b"ABC"]
