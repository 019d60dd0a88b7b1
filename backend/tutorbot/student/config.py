from __future__ import annotations

from ..settings import Settings, settings

LOCAL_HOSTS = ("localhost", "127.0.0.1")


def is_local_host(hostname: str) -> bool:
	return hostname.split(":", 1)[0].lower() in LOCAL_HOSTS


def api_base_url_for(hostname: str, config: Settings = settings) -> str:
	"""Pick the development backend when served from a local host, production otherwise."""
	if is_local_host(hostname):
		return config.dev_api_base_url
	return config.prod_api_base_url
