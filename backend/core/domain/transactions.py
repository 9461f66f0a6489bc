"""
core.domain.transactions — Helpers for safe state transitions.

Wraps ``select_for_update`` and savepoint handling into reusable
patterns so that every service follows the same concurrency-safe
approach.

Usage::

    from django.db import transaction
    from core.domain.transactions import lock_for_update

    with transaction.atomic():
        doc_request = lock_for_update(DocumentRequest, request_id)
        ...
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from django.db import IntegrityError, models, transaction

from core.domain.exceptions import NotFound

T = TypeVar("T")
M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any, *, related: tuple[str, ...] = ()) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.  Only the row of
    ``model_class`` itself is locked; ``related`` is joined with
    ``select_related`` for convenience.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.
        related:     Optional ``select_related`` paths.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    qs = model_class.objects.select_for_update(of=("self",))
    if related:
        qs = qs.select_related(*related)
    try:
        return qs.get(pk=pk)
    except (model_class.DoesNotExist, ValueError, TypeError):
        raise NotFound.for_resource(model_class._meta.verbose_name.title(), "id", pk)


def create_or_get_existing(
    create: Callable[[], T],
    get_existing: Callable[[], T],
) -> tuple[T, bool]:
    """
    Run ``create()`` in a savepoint; on a uniqueness violation roll the
    savepoint back and return ``get_existing()`` instead.

    Must be called inside an ``atomic()`` block so the outer
    transaction survives the rolled-back savepoint.

    Returns:
        ``(instance, created)``.
    """
    try:
        with transaction.atomic():
            return create(), True
    except IntegrityError:
        return get_existing(), False
