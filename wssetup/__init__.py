"""Workstation setup from a declarative manifest.

Core design goals:
- Idempotent directives: probe first, change only what is missing
- Manifest order is execution order
- Fail fast on the first directive that cannot be applied
- Centralized logging
"""

__all__ = []

__version__ = "0.1.0"
