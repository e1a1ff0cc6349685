"""Search box driver wiring the interaction state machine to query resolution."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, Optional, Protocol

from typeahead import obs
from typeahead.obs import logging as obs_logging
from typeahead.obs import metrics as obs_metrics
from typeahead.search.cache import QueryCache
from typeahead.search.clients import GitHubUserSearchClient, UserSearchClient
from typeahead.search.controller import QueryDataController
from typeahead.search.models import FetchState, UserRecord
from typeahead.settings import settings
from typeahead.widget import state as machine
from typeahead.widget.view import AutocompleteView, build_view, navigable_users

logger = logging.getLogger(__name__)

RenderListener = Callable[[AutocompleteView], None]


class Navigator(Protocol):
	"""Capability for opening an external page (a new browser tab)."""

	def open_external(self, url: str) -> None:
		...


class InputHandle(Protocol):
	"""Capability for moving focus on the rendered text input."""

	def focus(self) -> None:
		...

	def blur(self) -> None:
		...


class Autocomplete:
	"""Own the search box state and turn input events into transitions.

	The presentation layer forwards events to the public methods and
	re-renders from :meth:`view`, either on demand or through
	:meth:`subscribe`.
	"""

	def __init__(
		self,
		controller: QueryDataController,
		navigator: Navigator,
		*,
		limit: Optional[int] = None,
		placeholder: Optional[str] = None,
		input_handle: Optional[InputHandle] = None,
		search_base_url: Optional[str] = None,
	) -> None:
		limit = settings.suggestion_limit if limit is None else limit
		if limit < 1:
			raise ValueError("limit must be a positive integer")
		self._controller = controller
		self._navigator = navigator
		self._input = input_handle
		self._limit = limit
		self._placeholder = settings.placeholder if placeholder is None else placeholder
		self._search_base_url = search_base_url or settings.external_search_base_url
		self._session_id = uuid.uuid4().hex[:12]
		self._state = machine.WidgetState()
		self._listeners: list[RenderListener] = []
		self._applying = False
		self._unsubscribe = controller.subscribe(self._on_fetch_state)

	@property
	def state(self) -> machine.WidgetState:
		return self._state

	@property
	def fetch_state(self) -> FetchState:
		return self._controller.state

	@property
	def limit(self) -> int:
		return self._limit

	def view(self) -> AutocompleteView:
		return build_view(self._state, self._controller.state, limit=self._limit, placeholder=self._placeholder)

	def subscribe(self, listener: RenderListener) -> Callable[[], None]:
		self._listeners.append(listener)

		def _unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return _unsubscribe

	# Events -----------------------------------------------------------------

	def input_changed(self, text: str) -> None:
		self._apply(machine.input_changed(self._state, text))

	def focus_gained(self) -> None:
		self._apply(machine.focus_gained(self._state))

	def focus_lost(self) -> None:
		self._apply(machine.focus_lost(self._state))

	def key_pressed(self, key: machine.Key | str) -> None:
		if not isinstance(key, machine.Key):
			parsed = machine.Key.from_name(key)
			if parsed is None:
				return
			key = parsed
		suggestions = navigable_users(self._controller.state, self._limit)
		state = self._bounded_state(len(suggestions))
		transition = machine.key_pressed(state, key, suggestions, search_base_url=self._search_base_url)
		if any(isinstance(effect, machine.OpenExternal) and effect.target == "profile" for effect in transition.effects):
			obs_metrics.inc_selection("keyboard")
		self._apply(transition)

	def pointer_hover(self, index: int) -> None:
		count = len(navigable_users(self._controller.state, self._limit))
		self._apply(machine.pointer_hover(self._state, index, count))

	def pointer_select(self, user: UserRecord) -> None:
		if self._controller.state.is_loading:
			return
		obs_metrics.inc_selection("pointer")
		self._apply(machine.select(self._state, user))

	def clear_clicked(self) -> None:
		self._apply(machine.clear_clicked(self._state))

	async def aclose(self) -> None:
		self._unsubscribe()
		self._listeners.clear()
		await self._controller.aclose()

	# Internals --------------------------------------------------------------

	def _bounded_state(self, count: int) -> machine.WidgetState:
		if 0 <= self._state.highlight_index < count:
			return self._state
		return replace(self._state, highlight_index=-1)

	def _apply(self, transition: machine.Transition) -> None:
		previous = self._state
		fetch_before = self._controller.state
		self._state = transition.state
		if transition.state.query_text != previous.query_text:
			# Debounced work spawned here inherits the bound session id.
			tokens = obs_logging.bind_context(session_id=self._session_id)
			self._applying = True
			try:
				self._controller.observe(transition.state.query_text)
			finally:
				self._applying = False
				obs_logging.reset_context(tokens)
		for effect in transition.effects:
			self._run_effect(effect)
		if transition.state != previous or transition.effects or self._controller.state != fetch_before:
			self._notify()

	def _run_effect(self, effect: machine.Effect) -> None:
		if isinstance(effect, machine.OpenExternal):
			obs_metrics.inc_external_navigation(effect.target)
			logger.info("typeahead.navigate", extra={"target": effect.target})
			self._navigator.open_external(effect.url)
		elif isinstance(effect, machine.BlurInput):
			if self._input is not None:
				self._input.blur()
		elif isinstance(effect, machine.FocusInput):
			if self._input is not None:
				self._input.focus()

	def _on_fetch_state(self, _fetch: FetchState) -> None:
		# _apply renders once after the transition settles.
		if self._applying:
			return
		self._notify()

	def _notify(self) -> None:
		if not self._listeners:
			return
		rendered = self.view()
		for listener in list(self._listeners):
			listener(rendered)


def create_autocomplete(
	navigator: Navigator,
	*,
	client: Optional[UserSearchClient] = None,
	input_handle: Optional[InputHandle] = None,
) -> Autocomplete:
	"""Build a search box wired to the configured GitHub endpoint and cache.

	Also initialises logging once per process through :func:`typeahead.obs.init`.
	"""

	obs.init()
	controller = QueryDataController(
		client or GitHubUserSearchClient(),
		delay_ms=settings.debounce_delay_ms,
		cache=QueryCache(settings.cache_capacity),
		close_client=client is None,
	)
	return Autocomplete(controller, navigator, input_handle=input_handle)


__all__ = ["Autocomplete", "InputHandle", "Navigator", "create_autocomplete"]
