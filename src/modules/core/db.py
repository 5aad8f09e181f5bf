"""Database helpers that have no natural home on a single repository."""

from __future__ import annotations

from typing import Type

import structlog
from django.core.management.color import no_style
from django.db import connection, models

logger = structlog.get_logger(__name__)


def reset_identity(*model_classes: Type[models.Model]) -> None:
    """Restart the primary-key sequence of each model's table at 1.

    Uses the backend's own ``sequence_reset_by_name_sql`` so the same call
    works on SQLite (``sqlite_sequence``), PostgreSQL (``setval``) and
    MySQL (``AUTO_INCREMENT``).  The tables are expected to be empty.
    """
    sequences = [
        {"table": model._meta.db_table, "column": model._meta.pk.column}
        for model in model_classes
    ]
    statements = connection.ops.sequence_reset_by_name_sql(no_style(), sequences)
    with connection.cursor() as cursor:
        for sql in statements:
            cursor.execute(sql)
    logger.info(
        "db.identity_reset",
        tables=[seq["table"] for seq in sequences],
    )
