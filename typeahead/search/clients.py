"""Client wrappers for the remote user search API."""

from __future__ import annotations

import logging
import time
from typing import Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from typeahead.messages import ERROR_MESSAGE
from typeahead.obs import metrics as obs_metrics
from typeahead.search import exceptions
from typeahead.search.models import SearchUsersPayload, UserRecord
from typeahead.settings import settings

_LOG = logging.getLogger(__name__)


class UserSearchClient(Protocol):
	"""Interface for remote user lookups."""

	async def search_users(self, query: str) -> list[UserRecord]:
		...

	async def aclose(self) -> None:
		...


class GitHubUserSearchClient:
	"""Thin async wrapper around the GitHub user search endpoint."""

	def __init__(
		self,
		http: Optional[httpx.AsyncClient] = None,
		*,
		base_url: Optional[str] = None,
		timeout: Optional[float] = None,
	) -> None:
		self._owns_http = http is None
		self._http = http or httpx.AsyncClient(headers={"Accept": "application/json"}, follow_redirects=True)
		self._base_url = base_url or settings.search_api_url
		self._timeout = timeout if timeout is not None else settings.request_timeout_seconds

	async def __aenter__(self) -> GitHubUserSearchClient:
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		if self._owns_http:
			await self._http.aclose()

	def url_for(self, query: str) -> str:
		return f"{self._base_url}{quote(query, safe='')}"

	async def search_users(self, query: str) -> list[UserRecord]:
		started = time.perf_counter()
		try:
			response = await self._execute(self.url_for(query))
			users = self._parse_users(response)
		except exceptions.SearchError:
			obs_metrics.record_search("error", latency_seconds=time.perf_counter() - started)
			raise
		obs_metrics.record_search("ok", latency_seconds=time.perf_counter() - started)
		return users

	async def _execute(self, url: str) -> httpx.Response:
		try:
			response = await self._http.get(url, timeout=self._timeout)
		except httpx.HTTPError as exc:
			_LOG.warning("typeahead.client.transport_error", extra={"error": type(exc).__name__})
			raise exceptions.NetworkFailure(str(exc) or ERROR_MESSAGE) from exc
		if not response.is_success:
			raise exceptions.NetworkFailure.from_status(response.status_code, response.reason_phrase)
		return response

	def _parse_users(self, response: httpx.Response) -> list[UserRecord]:
		try:
			payload = SearchUsersPayload.model_validate_json(response.content)
		except ValidationError as exc:
			_LOG.warning("typeahead.client.bad_payload", extra={"errors": exc.error_count()})
			raise exceptions.ParseFailure() from exc
		return [UserRecord.from_payload(item) for item in payload.items]


__all__ = ["GitHubUserSearchClient", "UserSearchClient"]
