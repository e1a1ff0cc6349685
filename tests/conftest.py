import asyncio
import sys
from pathlib import Path

import pytest

# Ensure the package is importable when tests run without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
	sys.path.insert(0, str(PROJECT_ROOT))

from typeahead.search.models import UserRecord


OCTO_USERS = [
	UserRecord(id=1, login="abhishek", profile_url="https://github.com/abhishek"),
	UserRecord(id=2, login="github-user", profile_url="https://github.com/github-user"),
	UserRecord(id=3, login="john-doe", profile_url="https://github.com/john-doe"),
]


class StubSearchClient:
	"""Scriptable search client.

	``responses`` maps a query to a list of users or an exception to raise.
	Queries with an entry in ``gates`` block until the event is set.
	"""

	def __init__(self, responses=None):
		self.responses = dict(responses or {})
		self.gates: dict[str, asyncio.Event] = {}
		self.calls: list[str] = []
		self.closed = False

	def hold(self, query: str) -> asyncio.Event:
		gate = asyncio.Event()
		self.gates[query] = gate
		return gate

	async def search_users(self, query: str):
		self.calls.append(query)
		gate = self.gates.get(query)
		if gate is not None:
			await gate.wait()
		result = self.responses.get(query, [])
		if isinstance(result, BaseException):
			raise result
		return list(result)

	async def aclose(self) -> None:
		self.closed = True


class RecordingNavigator:
	def __init__(self):
		self.opened: list[str] = []

	def open_external(self, url: str) -> None:
		self.opened.append(url)


class RecordingInput:
	def __init__(self):
		self.events: list[str] = []

	def focus(self) -> None:
		self.events.append("focus")

	def blur(self) -> None:
		self.events.append("blur")


async def wait_for(predicate, *, timeout: float = 1.0) -> None:
	"""Poll ``predicate`` on the running loop until it holds."""
	deadline = asyncio.get_running_loop().time() + timeout
	while not predicate():
		if asyncio.get_running_loop().time() > deadline:
			raise AssertionError("condition not met before timeout")
		await asyncio.sleep(0.001)


@pytest.fixture
def stub_client():
	return StubSearchClient({"octo": OCTO_USERS})


@pytest.fixture
def navigator():
	return RecordingNavigator()


@pytest.fixture
def input_handle():
	return RecordingInput()
