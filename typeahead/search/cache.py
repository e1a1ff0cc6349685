"""Per-session query result cache."""

from __future__ import annotations

from collections import OrderedDict
from typing import Iterable, Optional

from typeahead.search.models import UserRecord


class QueryCache:
	"""Map exact query strings to the users returned for them.

	Keys are compared verbatim (case-sensitive, untrimmed). Without a
	capacity entries live for the whole session; with one the cache evicts
	the least recently used query once full.
	"""

	def __init__(self, capacity: Optional[int] = None) -> None:
		if capacity is not None and capacity < 1:
			raise ValueError("capacity must be positive")
		self._capacity = capacity
		self._entries: OrderedDict[str, tuple[UserRecord, ...]] = OrderedDict()

	@property
	def capacity(self) -> Optional[int]:
		return self._capacity

	def __contains__(self, query: object) -> bool:
		return query in self._entries

	def __len__(self) -> int:
		return len(self._entries)

	def get(self, query: str) -> Optional[tuple[UserRecord, ...]]:
		users = self._entries.get(query)
		if users is not None and self._capacity is not None:
			self._entries.move_to_end(query)
		return users

	def set(self, query: str, users: Iterable[UserRecord]) -> None:
		if not query.strip():
			raise ValueError("empty queries are never cached")
		self._entries[query] = tuple(users)
		self._entries.move_to_end(query)
		if self._capacity is not None:
			while len(self._entries) > self._capacity:
				self._entries.popitem(last=False)

	def clear(self) -> None:
		self._entries.clear()


__all__ = ["QueryCache"]
