"""View models handed to the presentation layer on every render."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from typeahead.messages import DEFAULT_PLACEHOLDER, LOADING_MESSAGE, NO_RESULTS_MESSAGE
from typeahead.search.models import FetchState, UserRecord
from typeahead.widget.state import WidgetState


class Segment(BaseModel):
	model_config = ConfigDict(frozen=True)

	text: str
	matched: bool = False


class SuggestionView(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["user", "loading", "empty"] = "user"
	id: int = 0
	login: str
	profile_url: str = ""
	selectable: bool = True
	highlighted: bool = False
	segments: list[Segment] = Field(default_factory=list)


class AutocompleteView(BaseModel):
	model_config = ConfigDict(frozen=True)

	query_text: str
	placeholder: str
	show_clear_icon: bool
	dropdown_visible: bool
	highlight_index: int = Field(..., ge=-1)
	suggestions: list[SuggestionView]
	is_loading: bool
	error: str | None = None
	empty_message: str = ""


def highlight_segments(text: str, query: str) -> list[Segment]:
	"""Split ``text`` around case-insensitive occurrences of ``query``."""

	needle = query.strip()
	if not needle:
		return [Segment(text=text)]
	segments: list[Segment] = []
	cursor = 0
	for match in re.finditer(re.escape(needle), text, flags=re.IGNORECASE):
		if match.start() > cursor:
			segments.append(Segment(text=text[cursor : match.start()]))
		segments.append(Segment(text=match.group(0), matched=True))
		cursor = match.end()
	if cursor < len(text) or not segments:
		segments.append(Segment(text=text[cursor:]))
	return segments


def visible_users(fetch: FetchState, limit: int) -> list[UserRecord]:
	return list(fetch.data[:limit])


def navigable_users(fetch: FetchState, limit: int) -> list[UserRecord]:
	"""Suggestions open to keyboard/pointer navigation; none while loading."""
	if fetch.is_loading:
		return []
	return visible_users(fetch, limit)


def effective_highlight(state: WidgetState, fetch: FetchState, limit: int) -> int:
	count = len(navigable_users(fetch, limit))
	return state.highlight_index if 0 <= state.highlight_index < count else -1


def _placeholder_entry(kind: Literal["loading", "empty"], message: str) -> SuggestionView:
	return SuggestionView(
		kind=kind,
		login=message,
		selectable=False,
		segments=[Segment(text=message)],
	)


def build_view(state: WidgetState, fetch: FetchState, *, limit: int, placeholder: str) -> AutocompleteView:
	query = state.query_text
	has_query = query.strip() != ""
	highlight = effective_highlight(state, fetch, limit)
	users = visible_users(fetch, limit)

	if fetch.is_loading:
		suggestions = [_placeholder_entry("loading", LOADING_MESSAGE)]
	elif not users and has_query:
		suggestions = [_placeholder_entry("empty", NO_RESULTS_MESSAGE)]
	else:
		suggestions = [
			SuggestionView(
				id=user.id,
				login=user.login,
				profile_url=user.profile_url,
				highlighted=index == highlight,
				segments=highlight_segments(user.login, query),
			)
			for index, user in enumerate(users)
		]

	return AutocompleteView(
		query_text=query,
		placeholder=placeholder or DEFAULT_PLACEHOLDER,
		show_clear_icon=query != "",
		dropdown_visible=state.dropdown_open and has_query and fetch.error is None,
		highlight_index=highlight,
		suggestions=suggestions,
		is_loading=fetch.is_loading,
		error=fetch.error,
		empty_message=NO_RESULTS_MESSAGE if not fetch.is_loading and not fetch.data and has_query else "",
	)


__all__ = [
	"AutocompleteView",
	"Segment",
	"SuggestionView",
	"build_view",
	"effective_highlight",
	"highlight_segments",
	"navigable_users",
	"visible_users",
]
