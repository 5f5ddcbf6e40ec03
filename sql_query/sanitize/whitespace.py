from __future__ import annotations

from typing import List

from sql_query.sanitize.types import WhitespaceScanState


class WhitespaceNormalizer:
    """Collapses whitespace runs outside quotes to a single space.

    Only ``'`` and ``"`` quoting is tracked. Dollar quotes and comments are
    not recognised, so run comment removal first when both are needed.
    """

    def normalize(self, sql: str) -> str:
        state = WhitespaceScanState()
        result: List[str] = []
        index = 0
        while index < len(sql):
            index = self._step(sql, index, result, state)
            state.check()
        return "".join(result)

    def _step(self, sql: str, index: int, result: List[str], state: WhitespaceScanState) -> int:
        char = sql[index]

        if char == "'" and not state.in_double_quote:
            return self._quote(sql, index, result, state)
        if char == '"' and not state.in_single_quote:
            return self._quote(sql, index, result, state)

        if char.isspace():
            if state.in_quote:
                result.append(char)
                state.previous_was_emitted_space = False
            elif not state.previous_was_emitted_space:
                result.append(" ")
                state.previous_was_emitted_space = True
            return index + 1

        result.append(char)
        state.previous_was_emitted_space = False
        return index + 1

    @staticmethod
    def _quote(sql: str, index: int, result: List[str], state: WhitespaceScanState) -> int:
        char = sql[index]
        inside = state.in_single_quote if char == "'" else state.in_double_quote
        state.previous_was_emitted_space = False
        # doubled quote inside a literal is an escape, not a close
        if inside and index + 1 < len(sql) and sql[index + 1] == char:
            result.append(char * 2)
            return index + 2
        if char == "'":
            state.in_single_quote = not state.in_single_quote
        else:
            state.in_double_quote = not state.in_double_quote
        result.append(char)
        return index + 1


def normalize_whitespace(sql: str) -> str:
    return WhitespaceNormalizer().normalize(sql)
