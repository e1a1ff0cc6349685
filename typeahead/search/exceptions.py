"""Custom exceptions for remote user search operations."""

from __future__ import annotations

from typing import Optional

from typeahead.messages import ERROR_MESSAGE


class SearchError(Exception):
	"""Base class for user search errors.

	``detail`` is always a message fit to show the user as-is.
	"""

	def __init__(self, detail: str = ERROR_MESSAGE, *, status_code: Optional[int] = None) -> None:
		super().__init__(detail)
		self.detail = detail
		self.status_code = status_code


class NetworkFailure(SearchError):
	"""Raised on a transport failure or a non-success response status."""

	@classmethod
	def from_status(cls, status_code: int, reason: str) -> NetworkFailure:
		return cls(f"GitHub API error: {reason}", status_code=status_code)


class ParseFailure(SearchError):
	"""Raised when the response body does not have the expected shape."""

	def __init__(self, detail: str = ERROR_MESSAGE) -> None:
		super().__init__(detail)
