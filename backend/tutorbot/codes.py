from __future__ import annotations
import random
from typing import Optional

# No I, O, 0 or 1: easy to misread when a teacher writes the code on a board
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 5


class InvalidCodeError(ValueError):
	pass


def generate_code(rng: Optional[random.Random] = None) -> str:
	rng = rng or random.SystemRandom()
	return "".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def normalize_code(raw: Optional[str]) -> str:
	"""Trim and upper-case a join code, rejecting anything not 5 characters long."""
	code = (raw or "").strip().upper()
	if len(code) != CODE_LENGTH:
		raise InvalidCodeError("Please enter a 5-letter code.")
	return code
