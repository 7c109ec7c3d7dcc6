"""
flagsync – client-side feature flag synchronisation.

Import path convention::

    from flagsync.application.feature_flags import FlagService, FlagSnapshot
    from flagsync.adapters.http import FlagServiceFactory, HttpFlagFetcher
    from flagsync.config.settings import FlagClientSettings, SettingsFactory
    from flagsync.kernel.errors import FetchError, UnknownFlagError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
