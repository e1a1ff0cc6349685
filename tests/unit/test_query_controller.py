import asyncio

import pytest
from prometheus_client import REGISTRY

from conftest import OCTO_USERS, StubSearchClient, wait_for
from typeahead.messages import ERROR_MESSAGE
from typeahead.search import exceptions
from typeahead.search.controller import QueryDataController
from typeahead.search.models import EMPTY_STATE, FetchState


def _counter(name: str, **labels) -> float:
	return REGISTRY.get_sample_value(name, labels or None) or 0.0


@pytest.mark.asyncio
async def test_empty_or_blank_query_publishes_empty_state(stub_client):
	controller = QueryDataController(stub_client, delay_ms=0)

	for query in ("", "   ", "\t"):
		assert controller.observe(query) == EMPTY_STATE
		assert not controller.debouncer.pending

	await controller.settle()
	assert stub_client.calls == []


@pytest.mark.asyncio
async def test_rapid_queries_fetch_once_with_final_string(stub_client):
	controller = QueryDataController(stub_client, delay_ms=20)

	for query in ("o", "oc", "oct", "octo"):
		controller.observe(query)
	state = await controller.settle()

	assert stub_client.calls == ["octo"]
	assert state == FetchState(data=tuple(OCTO_USERS))
	assert "octo" in controller.cache
	assert "oct" not in controller.cache


@pytest.mark.asyncio
async def test_cached_query_skips_network(stub_client):
	controller = QueryDataController(stub_client, delay_ms=0)
	hits_before = _counter("typeahead_cache_lookups_total", result="hit")

	controller.observe("octo")
	await controller.settle()
	controller.observe("oct")
	await controller.settle()
	controller.observe("octo")
	state = await controller.settle()

	assert stub_client.calls == ["octo", "oct"]
	assert state.data == tuple(OCTO_USERS)
	assert state.is_loading is False
	assert _counter("typeahead_cache_lookups_total", result="hit") == hits_before + 1


@pytest.mark.asyncio
async def test_loading_while_fetch_pending(stub_client):
	gate = stub_client.hold("octo")
	controller = QueryDataController(stub_client, delay_ms=0)

	controller.observe("octo")
	await wait_for(lambda: stub_client.calls == ["octo"])

	assert controller.state.is_loading is True
	assert controller.state.error is None

	gate.set()
	state = await controller.settle()
	assert state.is_loading is False
	assert state.data == tuple(OCTO_USERS)


@pytest.mark.asyncio
async def test_failure_is_published_and_not_cached():
	client = StubSearchClient({"abc": exceptions.NetworkFailure("network down")})
	controller = QueryDataController(client, delay_ms=0)

	controller.observe("abc")
	state = await controller.settle()

	assert state == FetchState(data=(), is_loading=False, error="network down")
	assert "abc" not in controller.cache

	controller.observe("")
	controller.observe("abc")
	await controller.settle()
	assert client.calls == ["abc", "abc"]


@pytest.mark.asyncio
async def test_unexpected_error_becomes_generic_message():
	client = StubSearchClient({"boom": RuntimeError("kaput")})
	controller = QueryDataController(client, delay_ms=0)

	controller.observe("boom")
	state = await controller.settle()

	assert state.error == ERROR_MESSAGE
	assert state.data == ()


@pytest.mark.asyncio
async def test_error_cleared_on_next_resolution():
	client = StubSearchClient({"bad": exceptions.ParseFailure(), "octo": OCTO_USERS})
	controller = QueryDataController(client, delay_ms=0)

	controller.observe("bad")
	await controller.settle()
	assert controller.state.error == ERROR_MESSAGE

	controller.observe("octo")
	state = await controller.settle()
	assert state.error is None
	assert state.data == tuple(OCTO_USERS)


@pytest.mark.asyncio
async def test_late_response_for_superseded_query_is_discarded():
	fast_users = OCTO_USERS[:1]
	client = StubSearchClient({"slow": OCTO_USERS, "fast": fast_users})
	slow_gate = client.hold("slow")
	controller = QueryDataController(client, delay_ms=0)
	stale_before = _counter("typeahead_stale_responses_total")

	controller.observe("slow")
	await wait_for(lambda: client.calls == ["slow"])
	controller.observe("fast")
	await wait_for(lambda: controller.state.data == tuple(fast_users))

	slow_gate.set()
	state = await controller.settle()

	assert state == FetchState(data=tuple(fast_users))
	assert "slow" in controller.cache
	assert _counter("typeahead_stale_responses_total") == stale_before + 1


@pytest.mark.asyncio
async def test_clearing_query_cancels_pending_fetch(stub_client):
	controller = QueryDataController(stub_client, delay_ms=10)

	controller.observe("octo")
	controller.observe("")
	await asyncio.sleep(0.03)

	assert stub_client.calls == []
	assert controller.state == EMPTY_STATE


@pytest.mark.asyncio
async def test_listeners_receive_published_states(stub_client):
	controller = QueryDataController(stub_client, delay_ms=0)
	seen = []
	unsubscribe = controller.subscribe(seen.append)

	controller.observe("octo")
	await controller.settle()
	unsubscribe()
	controller.observe("")

	assert seen == [
		FetchState(is_loading=True),
		FetchState(data=tuple(OCTO_USERS)),
	]


@pytest.mark.asyncio
async def test_aclose_cancels_pending_timer_and_closes_owned_client(stub_client):
	controller = QueryDataController(stub_client, delay_ms=10, close_client=True)

	controller.observe("octo")
	await controller.aclose()
	await asyncio.sleep(0.03)

	assert stub_client.calls == []
	assert stub_client.closed is True


@pytest.mark.asyncio
async def test_failing_listener_does_not_stall_resolution(stub_client):
	controller = QueryDataController(stub_client, delay_ms=0)
	seen = []

	def _render_once_then_fail(state):
		if not seen:
			seen.append(state)
			raise RuntimeError("render failed")
		seen.append(state)

	controller.subscribe(_render_once_then_fail)
	others = []
	controller.subscribe(others.append)

	controller.observe("octo")
	state = await controller.settle()

	assert stub_client.calls == ["octo"]
	assert state == FetchState(data=tuple(OCTO_USERS))
	assert seen == [FetchState(is_loading=True), FetchState(data=tuple(OCTO_USERS))]
	assert others == seen
