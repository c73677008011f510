"""Remote grants API client."""

from .client import GrantsAPIClient, FetchResult, default_elements

__all__ = ["GrantsAPIClient", "FetchResult", "default_elements"]
