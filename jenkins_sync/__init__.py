"""jenkins-sync: pull/push Jenkins job configuration, trigger and watch builds.

The interesting part is the live tail: ``LiveTail`` polls a job, resolves
its snapshot into a ``BuildStatus`` and streams the running build's log
until the build finishes.
"""

__version__ = "0.3.0"
__description__ = "Sync Jenkins job configuration, trigger builds and tail their logs"

from jenkins_sync.core.status_resolver import resolve_status
from jenkins_sync.core.tail_loop import LiveTail
from jenkins_sync.models.status import BuildStatus

__all__ = ["LiveTail", "BuildStatus", "resolve_status", "__version__"]
