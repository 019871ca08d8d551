"""Jenkins-sync CLI — Typer-based command-line interface.

Provides the ``jenkins-sync`` command with subcommands for pulling and
pushing job configuration, triggering and watching builds, and inspecting
job status and logs.

All output uses Rich for formatted terminal display.
"""
