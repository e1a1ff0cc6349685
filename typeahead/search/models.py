"""Domain models and wire payloads for user search."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True, slots=True)
class UserRecord:
	"""Normalized representation of a user returned by the search API."""

	id: int
	login: str
	profile_url: str

	@classmethod
	def from_payload(cls, payload: UserPayload) -> UserRecord:
		return cls(id=payload.id, login=payload.login, profile_url=payload.html_url)


class UserPayload(BaseModel):
	model_config = ConfigDict(extra="ignore", strict=True)

	id: int
	login: str
	html_url: str


class SearchUsersPayload(BaseModel):
	model_config = ConfigDict(extra="ignore")

	items: list[UserPayload]


@dataclass(frozen=True, slots=True)
class FetchState:
	"""Published result of resolving the current query."""

	data: tuple[UserRecord, ...] = ()
	is_loading: bool = False
	error: str | None = None


EMPTY_STATE = FetchState()
