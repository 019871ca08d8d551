"""Jenkins-sync presentation layer.

Modules
-------
sink
    ``TailSink``, the Protocol the live tail loop writes through.
renderer
    ``ConsoleTailSink`` renders a tail on a Rich console with a rewritable
    status line, plus the shared console icons.
"""

from jenkins_sync.monitor.renderer import ConsoleTailSink, format_eta
from jenkins_sync.monitor.sink import TailSink

__all__ = ["ConsoleTailSink", "TailSink", "format_eta"]
