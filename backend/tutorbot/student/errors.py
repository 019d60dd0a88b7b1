from __future__ import annotations


class CaptureError(Exception):
	"""Speech capture could not be started."""


class CaptureUnavailableError(CaptureError):
	pass


class CapturePermissionError(CaptureError):
	pass


class CaptureBlockedError(CaptureError):
	"""Raised when the recognizer refuses to start, e.g. an auto-start without a user gesture."""


class ProxyError(Exception):
	def __init__(self, message: str, status_code: int | None = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class SessionNotFoundError(ProxyError):
	pass


__all__ = [
	"CaptureError",
	"CaptureUnavailableError",
	"CapturePermissionError",
	"CaptureBlockedError",
	"ProxyError",
	"SessionNotFoundError",
]
