from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class CommentStrategy(str, Enum):
    NONE = "none"
    ONELINE = "oneline"
    MULTILINE = "multiline"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union[str, "CommentStrategy"]) -> "CommentStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown comment strategy: {value!r} (expected one of {choices})") from None

    @property
    def removes_oneline(self) -> bool:
        return self in (CommentStrategy.ONELINE, CommentStrategy.ALL)

    @property
    def removes_multiline(self) -> bool:
        return self in (CommentStrategy.MULTILINE, CommentStrategy.ALL)


class CommentSource(str, Enum):
    """Which prepared variant of a query gets its comments removed."""

    NONE = "none"
    PREPARED_FOR_LOGS = "prepared_for_logs"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union[str, "CommentSource"]) -> "CommentSource":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown comment source: {value!r} (expected one of {choices})") from None


@dataclass
class CommentScanState:
    in_single_quote: bool = False
    in_double_quote: bool = False
    in_dollar_quote: bool = False
    dollar_tag: Optional[str] = None
    in_line_comment: bool = False
    in_block_comment: bool = False
    escape_pending: bool = False

    @property
    def in_quote(self) -> bool:
        return self.in_single_quote or self.in_double_quote or self.in_dollar_quote

    @property
    def in_comment(self) -> bool:
        return self.in_line_comment or self.in_block_comment

    def check(self) -> None:
        quotes = self.in_single_quote + self.in_double_quote + self.in_dollar_quote
        assert quotes <= 1, "quote kinds overlap"
        assert not (self.in_line_comment and self.in_block_comment), "comment kinds overlap"
        assert not (self.in_quote and self.in_comment), "comment opened inside a quote"
        assert self.in_dollar_quote == (self.dollar_tag is not None), "dollar tag out of sync"


@dataclass
class WhitespaceScanState:
    in_single_quote: bool = False
    in_double_quote: bool = False
    previous_was_emitted_space: bool = False

    @property
    def in_quote(self) -> bool:
        return self.in_single_quote or self.in_double_quote

    def check(self) -> None:
        assert not (self.in_single_quote and self.in_double_quote), "quote kinds overlap"
