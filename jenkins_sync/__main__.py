"""Allow ``python -m jenkins_sync``."""

from jenkins_sync.cli.app import main

main()
