"""User-facing strings shown by the widget."""

NO_RESULTS_MESSAGE = "No matches found"
LOADING_MESSAGE = "🔄 Loading..."
ERROR_MESSAGE = "An error occurred. Please try again."
DEFAULT_PLACEHOLDER = "Search..."
