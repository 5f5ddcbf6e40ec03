from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple, Union

from sql_query.sanitize.types import CommentScanState, CommentStrategy

logger = logging.getLogger(__name__)

DOLLAR_TAG_CHAR = re.compile(r"[A-Za-z0-9_]")


def extract_dollar_tag(sql: str, index: int) -> Tuple[Optional[str], Optional[int]]:
    """Read a ``$tag$`` delimiter starting at ``index``.

    Returns ``(tag, length)`` where ``length`` counts both ``$`` markers, or
    ``(None, None)`` when the text at ``index`` is not a delimiter.
    """
    if index >= len(sql) or sql[index] != "$":
        return None, None
    i = index + 1
    while i < len(sql):
        char = sql[i]
        if char == "$":
            return sql[index + 1 : i], i - index + 1
        if not DOLLAR_TAG_CHAR.match(char):
            return None, None
        i += 1
    return None, None


class CommentRemover:
    """Strips ``--`` and ``/* */`` comments outside of quoted text.

    Single quotes, double quotes and PostgreSQL dollar quotes (``$$...$$``,
    ``$tag$...$tag$``) shield their content. Newlines ending a line comment
    are kept so line numbers survive.
    """

    def __init__(self, strategy: Union[str, CommentStrategy] = CommentStrategy.ALL) -> None:
        self.strategy = CommentStrategy.parse(strategy)

    def remove(self, sql: str) -> str:
        if self.strategy == CommentStrategy.NONE:
            return sql

        state = CommentScanState()
        result: List[str] = []
        index = 0
        while index < len(sql):
            index = self._step(sql, index, result, state)
            state.check()

        if state.in_comment or state.in_quote:
            logger.debug("SQL ended inside an unterminated %s", _open_construct(state))
        return "".join(result)

    def _step(self, sql: str, index: int, result: List[str], state: CommentScanState) -> int:
        char = sql[index]
        next_char = sql[index + 1] if index + 1 < len(sql) else None

        if state.escape_pending:
            if not state.in_comment:
                result.append(char)
            state.escape_pending = False
            return index + 1

        if char == "\\" and (state.in_single_quote or state.in_double_quote):
            result.append(char)
            state.escape_pending = True
            return index + 1

        if state.in_line_comment:
            if char == "\n":
                state.in_line_comment = False
                result.append(char)
            return index + 1

        if state.in_block_comment:
            if char == "*" and next_char == "/":
                state.in_block_comment = False
                return index + 2
            return index + 1

        if not state.in_quote:
            if char == "-" and next_char == "-" and self.strategy.removes_oneline:
                state.in_line_comment = True
                return index + 2
            if char == "/" and next_char == "*" and self.strategy.removes_multiline:
                state.in_block_comment = True
                return index + 2

        if char == "'" and not state.in_double_quote and not state.in_dollar_quote:
            if state.in_single_quote and next_char == "'":
                result.append("''")
                return index + 2
            state.in_single_quote = not state.in_single_quote
            result.append(char)
            return index + 1

        if char == '"' and not state.in_single_quote and not state.in_dollar_quote:
            if state.in_double_quote and next_char == '"':
                result.append('""')
                return index + 2
            state.in_double_quote = not state.in_double_quote
            result.append(char)
            return index + 1

        if char == "$" and not state.in_single_quote and not state.in_double_quote:
            tag, length = extract_dollar_tag(sql, index)
            if tag is not None and length is not None:
                if state.in_dollar_quote and tag == state.dollar_tag:
                    state.in_dollar_quote = False
                    state.dollar_tag = None
                    result.append(sql[index : index + length])
                    return index + length
                if not state.in_dollar_quote:
                    state.in_dollar_quote = True
                    state.dollar_tag = tag
                    result.append(sql[index : index + length])
                    return index + length

        result.append(char)
        return index + 1


def _open_construct(state: CommentScanState) -> str:
    if state.in_block_comment:
        return "block comment"
    if state.in_line_comment:
        return "line comment"
    if state.in_dollar_quote:
        return f"dollar quote (${state.dollar_tag}$)"
    if state.in_single_quote:
        return "single-quoted string"
    return "double-quoted identifier"


def remove_comments(sql: str, strategy: Union[str, CommentStrategy] = CommentStrategy.ALL) -> str:
    return CommentRemover(strategy).remove(sql)
