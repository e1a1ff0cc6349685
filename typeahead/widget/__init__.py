"""Search box widget exports."""

from .autocomplete import Autocomplete, InputHandle, Navigator, create_autocomplete
from .state import Key, WidgetState
from .view import AutocompleteView, SuggestionView, highlight_segments

__all__ = [
	"Autocomplete",
	"AutocompleteView",
	"InputHandle",
	"Key",
	"Navigator",
	"SuggestionView",
	"WidgetState",
	"create_autocomplete",
	"highlight_segments",
]
