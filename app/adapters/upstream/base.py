from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

QueryParams = Mapping[str, str | int | Sequence[str]]


class AbstractUpstreamClient(ABC):
	"""Interface for clients of the upstream open-data API."""

	@abstractmethod
	async def get_json(self, path: str, params: QueryParams) -> Any:
		"""Issue a GET request and return the decoded JSON body.

		Args:
			path: Endpoint path appended to the configured base URL.
			params: Query parameters; sequence values are repeated.

		Returns:
			Any: Decoded JSON payload (list or mapping).

		Raises:
			UpstreamError: If the request fails, returns non-2xx, or the body is not JSON.
		"""
		...

	async def aclose(self) -> None:
		"""Release network resources held by the client."""
		return None
