"""Interaction state machine for the search box.

Every event is a pure function ``(state, ...) -> Transition``. A transition
carries the next state plus the side effects the caller has to run (open a
URL, move input focus); nothing here touches the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Union

from typeahead.search.models import UserRecord


class Key(str, Enum):
	ARROW_DOWN = "ArrowDown"
	ARROW_UP = "ArrowUp"
	ENTER = "Enter"
	TAB = "Tab"

	@classmethod
	def from_name(cls, name: str) -> Optional[Key]:
		try:
			return cls(name)
		except ValueError:
			return None


@dataclass(frozen=True, slots=True)
class WidgetState:
	query_text: str = ""
	dropdown_open: bool = False
	highlight_index: int = -1
	focused: bool = False


@dataclass(frozen=True, slots=True)
class OpenExternal:
	url: str
	target: str


@dataclass(frozen=True, slots=True)
class BlurInput:
	pass


@dataclass(frozen=True, slots=True)
class FocusInput:
	pass


Effect = Union[OpenExternal, BlurInput, FocusInput]


@dataclass(frozen=True, slots=True)
class Transition:
	state: WidgetState
	effects: tuple[Effect, ...] = ()


def input_changed(state: WidgetState, text: str) -> Transition:
	return Transition(
		replace(state, query_text=text, dropdown_open=text.strip() != "", highlight_index=-1)
	)


def focus_gained(state: WidgetState) -> Transition:
	# Opens regardless of the text; an empty query is simply not rendered.
	return Transition(replace(state, focused=True, dropdown_open=True))


def focus_lost(state: WidgetState) -> Transition:
	return Transition(replace(state, focused=False, dropdown_open=False))


def select(state: WidgetState, user: UserRecord) -> Transition:
	next_state = replace(
		state,
		query_text=user.login,
		dropdown_open=False,
		highlight_index=-1,
		focused=False,
	)
	return Transition(next_state, (BlurInput(), OpenExternal(user.profile_url, "profile")))


def key_pressed(
	state: WidgetState,
	key: Key,
	suggestions: Sequence[UserRecord],
	*,
	search_base_url: str,
) -> Transition:
	"""Apply a key press against the suggestions currently open to navigation.

	``suggestions`` is empty while results are loading, which turns arrow keys
	into no-ops.
	"""

	if key in (Key.ARROW_DOWN, Key.ARROW_UP):
		if not suggestions:
			return Transition(state)
		max_index = len(suggestions) - 1
		current = state.highlight_index
		if key is Key.ARROW_DOWN:
			index = 0 if current >= max_index else current + 1
		else:
			index = max_index if current <= 0 else current - 1
		return Transition(replace(state, highlight_index=index))

	if key is Key.ENTER:
		if 0 <= state.highlight_index < len(suggestions):
			return select(state, suggestions[state.highlight_index])
		if state.query_text.strip():
			return Transition(state, (OpenExternal(f"{search_base_url}{state.query_text}", "search"),))
		return Transition(state)

	if key is Key.TAB:
		return Transition(replace(state, dropdown_open=False, highlight_index=-1))

	return Transition(state)


def pointer_hover(state: WidgetState, index: int, count: int) -> Transition:
	if index == state.highlight_index or not 0 <= index < count:
		return Transition(state)
	return Transition(replace(state, highlight_index=index))


def clear_clicked(state: WidgetState) -> Transition:
	next_state = replace(state, query_text="", dropdown_open=False, highlight_index=-1, focused=True)
	return Transition(next_state, (FocusInput(),))


__all__ = [
	"BlurInput",
	"Effect",
	"FocusInput",
	"Key",
	"OpenExternal",
	"Transition",
	"WidgetState",
	"clear_clicked",
	"focus_gained",
	"focus_lost",
	"input_changed",
	"key_pressed",
	"pointer_hover",
	"select",
]
