import pytest

from tutorbot.student.machine import State
from tutorbot.student.render import render, render_machine


@pytest.mark.parametrize("state", [State.THINKING, State.SPEAKING, State.REVIEWING, State.EXPIRED])
def test_record_disabled_outside_idle_and_listening(state):
	assert render(state).record_enabled is False


def test_idle_and_listening_views():
	assert render(State.IDLE).record_enabled is True
	assert render(State.IDLE).status_text == "Tap microphone to answer"
	listening = render(State.LISTENING)
	assert listening.record_enabled is True
	assert listening.pulse is True


def test_review_shows_review_controls():
	assert render(State.REVIEWING).show_review is True
	assert render(State.IDLE).show_review is False


def test_machine_without_time_limit_has_no_timer(harness):
	view = render_machine(harness().machine)
	assert view.timer_text is None
	assert view.timer_warning is False


def test_machine_timer_view(harness):
	machine = harness(time_limit=3).machine
	assert render_machine(machine).timer_text == "03:00"
	for _ in range(120):
		machine.timer.tick()
	view = render_machine(machine)
	assert view.timer_text == "01:00"
	assert view.timer_warning is True


@pytest.mark.parametrize("turns, stage", [(0, 0), (1, 0), (2, 1), (4, 1), (5, 2), (8, 3), (12, 3)])
def test_progress_follows_turn_count(harness, turns, stage):
	h = harness()
	h.context.turn_count = turns
	assert h.context.progress_stage() == stage
	assert render_machine(h.machine).progress == stage


def test_progress_after_opening_turn(harness, run):
	h = harness(replies=["Who is Jonas?"])
	run(h.machine.begin())
	assert render_machine(h.machine).progress == 0
