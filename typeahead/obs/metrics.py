"""Central registry for Prometheus metrics used across the widget."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

SEARCH_REQUESTS = Counter(
	"typeahead_search_requests_total",
	"Remote user searches executed",
	["outcome"],
)

SEARCH_LATENCY = Histogram(
	"typeahead_search_latency_seconds",
	"Remote user search latency in seconds",
	buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

CACHE_LOOKUPS = Counter(
	"typeahead_cache_lookups_total",
	"Query cache lookups for settled queries",
	["result"],
)

DEBOUNCE_COLLAPSED = Counter(
	"typeahead_debounce_collapsed_total",
	"Scheduled invocations superseded before their timer fired",
)

STALE_RESPONSES = Counter(
	"typeahead_stale_responses_total",
	"Responses discarded because a newer query superseded them",
)

SELECTIONS = Counter(
	"typeahead_selections_total",
	"Suggestions selected",
	["source"],
)

EXTERNAL_NAVIGATIONS = Counter(
	"typeahead_external_navigations_total",
	"External navigation targets opened",
	["target"],
)


def record_search(outcome: str, *, latency_seconds: float | None = None) -> None:
	SEARCH_REQUESTS.labels(outcome=outcome).inc()
	if latency_seconds is not None:
		SEARCH_LATENCY.observe(latency_seconds)


def inc_cache_hit() -> None:
	CACHE_LOOKUPS.labels(result="hit").inc()


def inc_cache_miss() -> None:
	CACHE_LOOKUPS.labels(result="miss").inc()


def inc_debounce_collapsed() -> None:
	DEBOUNCE_COLLAPSED.inc()


def inc_stale_response() -> None:
	STALE_RESPONSES.inc()


def inc_selection(source: str) -> None:
	SELECTIONS.labels(source=source).inc()


def inc_external_navigation(target: str) -> None:
	EXTERNAL_NAVIGATIONS.labels(target=target).inc()
