"""GitHub user search box: debounced lookups, query cache and keyboard navigation."""

__version__ = "0.1.0"
