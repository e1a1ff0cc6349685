"""User search exports."""

from .cache import QueryCache
from .clients import GitHubUserSearchClient, UserSearchClient
from .controller import QueryDataController
from .models import FetchState, UserRecord

__all__ = [
	"FetchState",
	"GitHubUserSearchClient",
	"QueryCache",
	"QueryDataController",
	"UserRecord",
	"UserSearchClient",
]
