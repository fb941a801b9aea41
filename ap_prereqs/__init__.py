"""ArduPilot build prerequisites installer for Fedora.

Core design goals:
- Fail-fast sequential steps
- Idempotent re-runs (presence checks, exact-line shell edits)
- Checksum-verified toolchain downloads
- Centralized logging
"""

__all__ = []
