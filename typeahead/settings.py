"""Settings for the typeahead widget with observability configuration."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default, *env_names: str):
	if env_names:
		alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
		return Field(default=default, validation_alias=alias)
	return Field(default=default)


class Settings(BaseSettings):
	search_api_url: str = _env_field("https://api.github.com/search/users?q=", "TYPEAHEAD_API_URL")
	# Enter without a highlighted suggestion opens this URL with the raw query appended.
	external_search_base_url: str = _env_field("https://github.com/", "TYPEAHEAD_SEARCH_BASE_URL")
	debounce_delay_ms: int = _env_field(300, "TYPEAHEAD_DEBOUNCE_MS")
	suggestion_limit: int = _env_field(15, "TYPEAHEAD_LIMIT")
	placeholder: str = _env_field("Type to search...", "TYPEAHEAD_PLACEHOLDER")
	request_timeout_seconds: float = _env_field(5.0, "TYPEAHEAD_REQUEST_TIMEOUT")
	# None keeps every query for the session; a number switches the cache to LRU eviction.
	cache_capacity: Optional[int] = _env_field(None, "TYPEAHEAD_CACHE_CAPACITY")

	environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
	service_name: str = _env_field("typeahead", "SERVICE_NAME")
	obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
	obs_log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")

	model_config = SettingsConfigDict(
		env_prefix="",
		env_file=".env",
		case_sensitive=False,
		extra="ignore",
		populate_by_name=True,
	)

	# Environment helpers
	def is_prod(self) -> bool:
		return self.environment.lower() in ("prod", "production", "live")

	def is_dev(self) -> bool:
		return self.environment.lower() in ("dev", "development")

	@field_validator("suggestion_limit")
	@classmethod
	def _positive_limit(cls, value: int) -> int:
		if value < 1:
			raise ValueError("suggestion_limit must be a positive integer")
		return value

	@field_validator("debounce_delay_ms")
	@classmethod
	def _non_negative_delay(cls, value: int) -> int:
		if value < 0:
			raise ValueError("debounce_delay_ms must not be negative")
		return value

	@field_validator("cache_capacity", mode="before")
	@classmethod
	def _blank_capacity(cls, value):
		"""Treat an empty env value as "no capacity" (unbounded cache)."""
		if value in (None, ""):
			return None
		return value

	@field_validator("cache_capacity")
	@classmethod
	def _positive_capacity(cls, value: Optional[int]) -> Optional[int]:
		if value is not None and value < 1:
			raise ValueError("cache_capacity must be positive when set")
		return value


settings = Settings()
