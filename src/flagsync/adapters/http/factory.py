"""HTTP adapter – FlagServiceFactory (settings → client → fetcher → service)."""
from __future__ import annotations

from flagsync.adapters.http.client import HttpxHttpClient, TokenProvider
from flagsync.adapters.http.fetcher import HttpFlagFetcher
from flagsync.application.feature_flags.monitor import StatusMonitor
from flagsync.application.feature_flags.service import FlagService, UserProvider
from flagsync.application.scheduler import Scheduler
from flagsync.config.settings import FlagClientSettings
from flagsync.kernel.time import Clock
from flagsync.observability.metrics import Metrics
from flagsync.resilience.retry import TenacityRetryPolicy


class FlagServiceFactory:
    """Wire a :class:`FlagService` against the REST authority from settings.

    Usage::

        settings = SettingsFactory.create(FlagClientSettings, [EnvSettingsLoader()])
        service = FlagServiceFactory.create(settings, token_provider=session.token)
        async with service:
            ...
    """

    @staticmethod
    def create_client(
        settings: FlagClientSettings,
        *,
        token_provider: TokenProvider | None = None,
    ) -> HttpxHttpClient:
        return HttpxHttpClient(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            token_provider=token_provider,
        )

    @staticmethod
    def create(
        settings: FlagClientSettings,
        *,
        token_provider: TokenProvider | None = None,
        user_provider: UserProvider | None = None,
        client: HttpxHttpClient | None = None,
        scheduler: Scheduler | None = None,
        clock: Clock | None = None,
        metrics: Metrics | None = None,
    ) -> FlagService:
        if client is None:
            client = FlagServiceFactory.create_client(settings, token_provider=token_provider)
        fetcher = HttpFlagFetcher(client, strict=settings.strict_payloads)
        retry_policy = None
        if settings.refresh_max_attempts > 1:
            retry_policy = TenacityRetryPolicy.for_network_errors(settings.refresh_max_attempts)
        return FlagService(
            fetcher,
            scheduler=scheduler,
            clock=clock,
            refresh_interval=settings.refresh_interval_seconds,
            check_ttl=settings.check_ttl_seconds,
            auto_refresh=settings.auto_refresh,
            metrics=metrics,
            retry_policy=retry_policy,
            user_provider=user_provider,
        )

    @staticmethod
    def create_monitor(
        settings: FlagClientSettings,
        service: FlagService,
        *,
        scheduler: Scheduler | None = None,
    ) -> StatusMonitor:
        return StatusMonitor(
            service,
            scheduler,
            interval=settings.monitor_interval_seconds,
        )


__all__ = ["FlagServiceFactory"]
