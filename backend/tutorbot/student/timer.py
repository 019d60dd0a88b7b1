from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger("tutorbot.student.timer")

WARNING_SECONDS = 60


class SessionTimer:
	"""One-second countdown that calls `on_expire` once when it reaches zero.

	A timer built with no minutes (or a non-positive count) is inactive: it
	never ticks and never expires. Once expired it cannot be restarted.
	"""

	def __init__(
		self,
		minutes: Optional[int],
		on_expire: Callable[[], None],
		on_tick: Optional[Callable[[int], None]] = None,
	) -> None:
		self.minutes = minutes if minutes and minutes > 0 else 0
		self.remaining_seconds = self.minutes * 60
		self.expired = False
		self._on_expire = on_expire
		self._on_tick = on_tick
		self._task: Optional[asyncio.Task] = None

	@property
	def active(self) -> bool:
		return self.minutes > 0

	@property
	def warning(self) -> bool:
		return self.active and not self.expired and self.remaining_seconds <= WARNING_SECONDS

	def display(self) -> str:
		minutes, seconds = divmod(max(self.remaining_seconds, 0), 60)
		return f"{minutes:02d}:{seconds:02d}"

	def tick(self) -> None:
		if not self.active or self.expired:
			return
		self.remaining_seconds -= 1
		if self._on_tick is not None:
			self._on_tick(self.remaining_seconds)
		if self.remaining_seconds <= 0:
			self.remaining_seconds = 0
			self.expired = True
			logger.info("Session time limit of %d minute(s) reached", self.minutes)
			self._on_expire()

	async def run(self) -> None:
		while self.active and not self.expired:
			await asyncio.sleep(1)
			self.tick()

	def start(self) -> None:
		if not self.active or self.expired or self._task is not None:
			return
		self._task = asyncio.get_running_loop().create_task(self.run())

	def cancel(self) -> None:
		if self._task is not None and not self._task.done():
			self._task.cancel()
		self._task = None
