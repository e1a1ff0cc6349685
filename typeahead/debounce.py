"""Debounced scheduling of async work on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from typeahead.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class Debouncer:
	"""Collapse rapid calls into one invocation of ``work`` after a quiet period.

	Each :meth:`schedule` call cancels the pending timer and arms a new one, so
	``work`` runs once with the arguments of the last call. The timer is the
	only thing a reschedule cancels; work that already started keeps running
	until it finishes or the debouncer is closed.
	"""

	def __init__(self, work: Callable[..., Awaitable[Any]], delay_ms: int) -> None:
		if delay_ms < 0:
			raise ValueError("delay_ms must not be negative")
		self._work = work
		self._delay = delay_ms / 1000
		self._timer: Optional[asyncio.Task] = None
		self._running: set[asyncio.Task] = set()
		self._closed = False

	@property
	def delay_ms(self) -> int:
		return int(self._delay * 1000)

	@property
	def pending(self) -> bool:
		return self._timer is not None and not self._timer.done()

	def schedule(self, *args: Any) -> None:
		if self._closed:
			raise RuntimeError("debouncer is closed")
		if self.pending:
			obs_metrics.inc_debounce_collapsed()
			logger.debug("typeahead.debounce.collapsed")
		self.cancel()
		self._timer = asyncio.create_task(self._fire_after_delay(args), name="typeahead-debounce")

	def cancel(self) -> None:
		timer = self._timer
		self._timer = None
		if timer is not None and not timer.done():
			timer.cancel()

	async def _fire_after_delay(self, args: tuple[Any, ...]) -> None:
		await asyncio.sleep(self._delay)
		# From here on a reschedule must not cancel us, so hand the work to its own task.
		self._timer = None
		task = asyncio.create_task(self._work(*args), name="typeahead-debounced-work")
		self._running.add(task)
		task.add_done_callback(self._running.discard)

	async def join(self) -> None:
		"""Wait until no timer is pending and all started work has finished."""
		while self.pending or self._running:
			waiting = [task for task in (self._timer, *self._running) if task is not None]
			await asyncio.gather(*waiting, return_exceptions=True)

	async def aclose(self) -> None:
		"""Cancel the pending timer and any running work."""
		self._closed = True
		tasks = [task for task in (self._timer, *self._running) if task is not None]
		self._timer = None
		for task in tasks:
			task.cancel()
		if tasks:
			await asyncio.gather(*tasks, return_exceptions=True)
		self._running.clear()


__all__ = ["Debouncer"]
