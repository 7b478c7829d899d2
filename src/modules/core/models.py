"""Base abstract models shared by the service's domain modules.

Provides:
- ``BaseModel``: ``created_at`` / ``updated_at`` timestamp bookkeeping.
- ``ActiveQuerySet`` / ``ActiveManager``: soft-delete helpers driven by a
  boolean ``active`` column.

Design decisions:
- Timestamps are assigned in ``save()`` instead of via ``auto_now`` /
  ``auto_now_add`` so a freshly created row has ``created_at == updated_at``
  (Django evaluates each ``auto_now*`` field with its own ``now()`` call).
- ``objects`` returns ALL records (unfiltered).  Use ``.active()``
  explicitly to exclude soft-deleted rows.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with timestamp bookkeeping.

    The primary key is the project-wide ``DEFAULT_AUTO_FIELD`` surrogate;
    modules that expose records externally add their own opaque identifier.
    """

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Stamp ``updated_at`` and make sure it is written with ``update_fields``."""
        if self._state.adding:
            self.updated_at = self.created_at
        else:
            self.updated_at = timezone.now()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Soft delete infrastructure
# ---------------------------------------------------------------------------


class ActiveQuerySet(models.QuerySet):
    """QuerySet with soft-delete helpers."""

    def active(self) -> ActiveQuerySet:
        """Return only records that have not been soft-deleted."""
        return self.filter(active=True)

    def inactive(self) -> ActiveQuerySet:
        """Return only soft-deleted records."""
        return self.filter(active=False)

    def deactivate(self) -> int:
        """Bulk soft-delete: flips ``active`` and refreshes ``updated_at``.

        Returns the number of affected rows.  Rows that are already inactive
        are still counted, matching a plain ``UPDATE ... SET active = false``.
        """
        return self.update(active=False, updated_at=timezone.now())


class ActiveManager(models.Manager.from_queryset(ActiveQuerySet)):
    """Manager exposing ``.active()`` / ``.inactive()`` on the queryset."""
