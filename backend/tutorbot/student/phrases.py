from __future__ import annotations

import random
from typing import List, Optional, Sequence

ONBOARDING_PHRASE = (
	"Take a breath and when you are ready, please start speaking. "
	"When done press the mic button so you can review your answer before submitting."
)
REMINDER_PHRASE = (
	"Remember, take your time. Press the mic button to stop. "
	"You can always review your response if you need to."
)
POOL_PHRASES: Sequence[str] = (
	"Take a moment to reflect, and start when you are ready.",
	"I'm ready to listen to your response.",
)


def fisher_yates(items: List[str], rng: random.Random) -> None:
	for i in range(len(items) - 1, 0, -1):
		j = rng.randint(0, i)
		items[i], items[j] = items[j], items[i]


class TransitionPhraseSupplier:
	"""Coaching text appended to the interviewer's early turns.

	Turn 1 gets the onboarding instruction and turn 2 a reminder. Later turns
	draw from a pool shuffled once per session, without replacement; once the
	pool is empty every turn gets an empty string.
	"""

	def __init__(self, pool: Sequence[str] = POOL_PHRASES, rng: Optional[random.Random] = None) -> None:
		self._rng = rng or random.Random()
		self._available: List[str] = list(pool)
		fisher_yates(self._available, self._rng)

	@property
	def remaining(self) -> int:
		return len(self._available)

	def phrase_for_turn(self, turn: int) -> str:
		if turn == 1:
			return ONBOARDING_PHRASE
		if turn == 2:
			return REMINDER_PHRASE
		if self._available:
			return self._available.pop(0)
		return ""
