from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sql_query.config import build_config, comment_strategy, should_comments_be_removed
from sql_query.sanitize.comments import remove_comments
from sql_query.sanitize.whitespace import normalize_whitespace

logger = logging.getLogger(__name__)


@dataclass
class PreparedSql:
    sql: str
    for_logs: str


def prepare_sql(sql: str, config: Optional[Dict[str, Any]] = None, *, for_logs: bool = False) -> str:
    """Apply the configured comment removal, then collapse whitespace for logs.

    Comments go first: the whitespace pass does not understand dollar quotes
    or comments and would otherwise fold a line comment into the next line.
    """
    config, _ = build_config(config)
    prepared = sql
    if should_comments_be_removed(config, for_logs=for_logs):
        strategy = comment_strategy(config)
        prepared = remove_comments(prepared, strategy)
        logger.debug("Removed comments (strategy=%s, for_logs=%s)", strategy.value, for_logs)
    if for_logs:
        prepared = normalize_whitespace(prepared)
    return prepared


def prepare_for_logs(sql: str, config: Optional[Dict[str, Any]] = None) -> str:
    return prepare_sql(sql, config, for_logs=True)


def prepare_variants(sql: str, config: Optional[Dict[str, Any]] = None) -> PreparedSql:
    return PreparedSql(
        sql=prepare_sql(sql, config, for_logs=False),
        for_logs=prepare_sql(sql, config, for_logs=True),
    )
