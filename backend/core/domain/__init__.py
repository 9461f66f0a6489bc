"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF exception handler for the exceptions above.
notifications      Synchronous notification creation helper.
transactions       Helpers for ``select_for_update`` and savepoint-guarded creates.
access             Registrar / owner role checks.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidArgument, NotFound
    from core.domain.notifications import NotificationService
    from core.domain.transactions import lock_for_update
    from core.domain.access import require_registrar
"""
