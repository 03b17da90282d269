"""Ollama installer for Linux (Python, step-driven).

Core design goals:
- Fail fast before touching the host
- Idempotent steps, safe to re-run after an interruption
- Existing user data always wins over migrated data
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
