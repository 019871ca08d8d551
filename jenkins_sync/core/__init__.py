"""Jenkins-sync core — build status resolution and live log tailing."""

from jenkins_sync.core.config_store import JobConfigStore
from jenkins_sync.core.status_resolver import resolve_status
from jenkins_sync.core.tail_loop import LiveTail, TailState, WatchCancelled

__all__ = ["JobConfigStore", "resolve_status", "LiveTail", "TailState", "WatchCancelled"]
