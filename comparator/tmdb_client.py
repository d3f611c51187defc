"""
TMDb metadata client.
Fetches full detail records used to backfill attributes missing from summary records.
"""

import asyncio
from typing import Any, Dict, Optional

import requests
from loguru import logger

from .models import Category


class MetadataFetchError(Exception):
	"""Raised when the metadata API cannot be reached or answers with an error."""


class TMDbClient:
	"""
	Thin wrapper around The Movie Database REST API.
	Requests are blocking, so the async entry point runs them in a worker thread.
	"""

	BASE_URL = 'https://api.themoviedb.org/3'

	def __init__(
		self,
		api_key: Optional[str],
		base_url: Optional[str] = None,
		language: str = 'en-US',
		timeout: float = 10.0,
		session: Optional[requests.Session] = None,
	):
		if not api_key:
			raise ValueError("TMDB_API_KEY is not set; get one at https://www.themoviedb.org/settings/api")
		self.api_key = api_key
		self.base_url = (base_url or self.BASE_URL).rstrip('/')
		self.language = language
		self.timeout = timeout
		self.session = session or requests.Session()

	def _get(self, path: str, **params) -> Dict[str, Any]:
		params.setdefault('api_key', self.api_key)
		params.setdefault('language', self.language)
		url = f"{self.base_url}{path}"
		try:
			response = self.session.get(url, params=params, timeout=self.timeout)
			response.raise_for_status()
			return response.json()
		except requests.RequestException as e:
			raise MetadataFetchError(f"GET {path} failed: {e}") from e
		except ValueError as e:  # body was not JSON
			raise MetadataFetchError(f"GET {path} returned invalid JSON: {e}") from e

	def get_detail(self, category: Category, item_id: int) -> Dict[str, Any]:
		"""Blocking fetch of /movie/{id} or /tv/{id}."""
		logger.debug(f"[TMDb] Fetching detail for {Category(category).value} {item_id}")
		return self._get(f"/{Category(category).value}/{int(item_id)}")

	async def fetch_detail(self, category: Category, item_id: int) -> Dict[str, Any]:
		return await asyncio.to_thread(self.get_detail, category, item_id)
