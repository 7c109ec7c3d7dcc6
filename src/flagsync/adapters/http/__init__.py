"""HTTP adapter – httpx client, REST flag fetcher and service wiring."""
from flagsync.adapters.http.client import HttpClient, HttpxHttpClient, TokenProvider
from flagsync.adapters.http.fetcher import HttpFlagFetcher
from flagsync.adapters.http.factory import FlagServiceFactory

__all__ = ["FlagServiceFactory", "HttpClient", "HttpFlagFetcher", "HttpxHttpClient", "TokenProvider"]
