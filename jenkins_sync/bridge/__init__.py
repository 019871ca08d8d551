"""Bridge layer between jenkins-sync and the Jenkins REST API.

Modules
-------
transport
    ``JenkinsClient`` wraps an authenticated ``httpx.Client`` and maps every
    HTTP failure to ``TransportError``.
"""

from jenkins_sync.bridge.transport import JenkinsClient, TransportError

__all__ = ["JenkinsClient", "TransportError"]
