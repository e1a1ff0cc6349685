"""Query resolution: debounce, cache and remote lookups behind one state."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from typeahead.debounce import Debouncer
from typeahead.messages import ERROR_MESSAGE
from typeahead.obs import logging as obs_logging
from typeahead.obs import metrics as obs_metrics
from typeahead.search import exceptions
from typeahead.search.cache import QueryCache
from typeahead.search.clients import UserSearchClient
from typeahead.search.models import EMPTY_STATE, FetchState

_LOG = logging.getLogger(__name__)

Listener = Callable[[FetchState], None]


class QueryDataController:
	"""Publish ``{data, is_loading, error}`` for the latest observed query.

	Every :meth:`observe` call starts a new generation. A resolution only
	publishes while its generation is still the current one, so a slow
	response for an older query never overwrites a newer result.
	"""

	def __init__(
		self,
		client: UserSearchClient,
		*,
		delay_ms: int,
		cache: Optional[QueryCache] = None,
		close_client: bool = False,
	) -> None:
		self._client = client
		self._close_client = close_client
		self._cache = cache if cache is not None else QueryCache()
		self._debouncer = Debouncer(self._resolve, delay_ms)
		self._generation = 0
		self._query = ""
		self._state = EMPTY_STATE
		self._listeners: list[Listener] = []

	async def __aenter__(self) -> QueryDataController:
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	@property
	def state(self) -> FetchState:
		return self._state

	@property
	def query(self) -> str:
		return self._query

	@property
	def cache(self) -> QueryCache:
		return self._cache

	@property
	def debouncer(self) -> Debouncer:
		return self._debouncer

	def subscribe(self, listener: Listener) -> Callable[[], None]:
		self._listeners.append(listener)

		def _unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return _unsubscribe

	def observe(self, query: str) -> FetchState:
		self._generation += 1
		self._query = query
		if not query.strip():
			self._debouncer.cancel()
			self._publish(EMPTY_STATE)
			return self._state
		self._debouncer.schedule(query, self._generation)
		return self._state

	async def settle(self) -> FetchState:
		"""Wait for the pending timer and in-flight lookups, then return the state."""
		await self._debouncer.join()
		return self._state

	async def aclose(self) -> None:
		await self._debouncer.aclose()
		self._listeners.clear()
		if self._close_client:
			await self._client.aclose()

	def _is_current(self, generation: int) -> bool:
		return generation == self._generation

	async def _resolve(self, query: str, generation: int) -> None:
		if not self._is_current(generation):
			return
		tokens = obs_logging.bind_context(query=query)
		try:
			cached = self._cache.get(query)
			if cached is not None:
				obs_metrics.inc_cache_hit()
				self._publish(FetchState(data=cached))
				return
			obs_metrics.inc_cache_miss()
			self._publish(FetchState(data=self._state.data, is_loading=True))
			await self._fetch(query, generation)
		finally:
			obs_logging.reset_context(tokens)

	async def _fetch(self, query: str, generation: int) -> None:
		try:
			users = await self._client.search_users(query)
		except exceptions.SearchError as exc:
			_LOG.warning(
				"typeahead.fetch.failure",
				extra={"detail": exc.detail, "status_code": exc.status_code, "kind": type(exc).__name__},
			)
			self._publish_if_current(generation, FetchState(error=exc.detail))
			return
		except Exception:
			_LOG.exception("typeahead.fetch.exception")
			self._publish_if_current(generation, FetchState(error=ERROR_MESSAGE))
			return
		records = tuple(users)
		self._cache.set(query, records)
		self._publish_if_current(generation, FetchState(data=records))

	def _publish_if_current(self, generation: int, state: FetchState) -> None:
		if not self._is_current(generation):
			obs_metrics.inc_stale_response()
			_LOG.debug("typeahead.fetch.stale_discarded")
			return
		self._publish(state)

	def _publish(self, state: FetchState) -> None:
		if state == self._state:
			return
		self._state = state
		for listener in list(self._listeners):
			try:
				listener(state)
			except Exception:
				_LOG.exception("typeahead.listener.failure")


__all__ = ["QueryDataController"]
