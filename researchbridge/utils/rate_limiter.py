"""Request budgets for the OpenAlex and ROR APIs."""

from typing import Optional
from urllib.parse import urlparse

from aiolimiter import AsyncLimiter

from researchbridge.models.config import SourceConfig


def host_of(url: str) -> str:
    return urlparse(url).netloc.lower()


class HostRateLimiter:
    """One aiolimiter budget per API host.

    OpenAlex and ROR publish different limits, so each configured host
    gets its own rate; any other host falls back to ``default_rate``.
    All requests to one host share a single limiter, however many
    keyword searches are in flight.
    """

    def __init__(
        self,
        default_rate: float = 10.0,
        host_rates: Optional[dict[str, float]] = None,
        time_period: float = 1.0,
    ):
        """
        Args:
            default_rate: Requests per time_period for unlisted hosts
            host_rates: Requests per time_period keyed by host name
            time_period: Window in seconds
        """
        self.default_rate = default_rate
        self.host_rates = {host.lower(): rate for host, rate in (host_rates or {}).items()}
        self.time_period = time_period
        self.limiters: dict[str, AsyncLimiter] = {}

    @classmethod
    def from_config(cls, config: SourceConfig) -> "HostRateLimiter":
        """Budgets for the configured OpenAlex and ROR base URLs."""
        return cls(
            default_rate=config.requests_per_second,
            host_rates={
                host_of(config.openalex_base_url): config.requests_per_second,
                host_of(config.ror_base_url): config.ror_requests_per_second,
            },
        )

    def rate_for(self, host: str) -> float:
        return self.host_rates.get(host, self.default_rate)

    def limiter_for(self, url: str) -> AsyncLimiter:
        host = host_of(url)
        limiter = self.limiters.get(host)
        if limiter is None:
            limiter = AsyncLimiter(self.rate_for(host), self.time_period)
            self.limiters[host] = limiter
        return limiter

    async def acquire(self, url: str) -> None:
        """Wait for a request slot on the URL's host."""
        await self.limiter_for(url).acquire()
