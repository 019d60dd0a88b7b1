from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .machine import State
from .prompts import AI_NAME


@dataclass(frozen=True)
class View:
	status_text: str
	tone: str
	record_icon: str
	record_enabled: bool
	show_review: bool
	pulse: bool = False
	timer_text: Optional[str] = None
	timer_warning: bool = False
	progress: int = 0


_VIEWS = {
	State.IDLE: View("Tap microphone to answer", "gray", "microphone", True, False),
	State.LISTENING: View("I'm Listening... (Press to Stop)", "green", "microphone", True, False, pulse=True),
	State.REVIEWING: View("Review your answer", "indigo", "microphone", False, True),
	State.THINKING: View(f"{AI_NAME} is thinking...", "indigo", "brain", False, False, pulse=True),
	State.SPEAKING: View(f"{AI_NAME} is speaking...", "blue", "volume-up", False, False, pulse=True),
	State.EXPIRED: View("Time is up", "red", "clock", False, False),
}


def render(state: State, timer_text: Optional[str] = None, timer_warning: bool = False, progress: int = 0) -> View:
	"""Describe what the interview screen shows for `state`."""
	return replace(_VIEWS[state], timer_text=timer_text, timer_warning=timer_warning, progress=progress)


def render_machine(machine) -> View:
	timer = machine.timer
	progress = machine.context.progress_stage()
	if not timer.active:
		return render(machine.state, progress=progress)
	return render(machine.state, timer_text=timer.display(), timer_warning=timer.warning or timer.expired, progress=progress)
