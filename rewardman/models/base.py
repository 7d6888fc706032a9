"""Shared model bases."""

from django.db import models


class AppendOnlyModel(models.Model):
    """
    Audit row that can be inserted once and never updated or deleted.

    Queryset-level ``update()``/``delete()`` bypass these hooks; services
    never call them on audit tables.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            from rewardman.exceptions import RewardmanError

            raise RewardmanError(
                "IMMUTABLE_RECORD",
                model=type(self).__name__,
                pk=self.pk,
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        from rewardman.exceptions import RewardmanError

        raise RewardmanError("IMMUTABLE_RECORD", model=type(self).__name__, pk=self.pk)
