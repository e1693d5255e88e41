"""devsetup: workstation bootstrap (Python-first, detect-then-act).

Core design goals:
- Idempotent steps
- Fail fast on the first fatal error
- Architecture-aware downloads
- Centralized logging
"""

__all__ = []
