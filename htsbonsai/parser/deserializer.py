"""Reader for the ``KEY:VALUE`` header sections of voice files."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator
from typing import Optional, TypeVar

T = TypeVar("T")


class DeserializeErrorKind(enum.Enum):
    """The ways reading a header section can fail."""

    MESSAGE = "custom message"
    EOF = "unexpected end of input"
    EXPECTED_BOOL = "expected bool (0 or 1)"
    EXPECTED_INTEGER = "expected integer value"
    EXPECTED_ARRAY_COMMA = "expected comma as an array delimiter"
    EXPECTED_MAP_COLON = "expected colon as map delimiter"
    EXPECTED_MAP_NEWLINE = "expected newline as map delimiter"
    TRAILING_CHARACTERS = "some characters were not consumed"


class DeserializeError(ValueError):
    """Raised when a header section cannot be read."""

    def __init__(self, kind: DeserializeErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message if message is not None else kind.value)

    @classmethod
    def custom(cls, message: object) -> DeserializeError:
        """Error carrying a free-form message."""
        return cls(DeserializeErrorKind.MESSAGE, str(message))


class Deserializer:
    """Cursor over header text with a stack of active delimiters."""

    def __init__(self, text: str) -> None:
        self.input = text
        self._contexts: list[str] = []

    def enter(self, delim: str) -> None:
        """Make ``delim`` the current delimiter."""
        self._contexts.append(delim)

    def exit(self) -> Optional[str]:
        """Drop the current delimiter and return it."""
        return self._contexts.pop() if self._contexts else None

    def _is_delimiter(self, char: str) -> bool:
        return char in self._contexts

    def peek_char(self) -> str:
        """Return the next character without consuming it."""
        if not self.input:
            raise DeserializeError(DeserializeErrorKind.EOF)
        return self.input[0]

    def next_char(self) -> str:
        """Consume and return the next character."""
        char = self.peek_char()
        self.input = self.input[1:]
        return char

    def parse_bool(self) -> bool:
        """Read ``0`` or ``1``."""
        char = self.next_char()
        if char == "0":
            return False
        if char == "1":
            return True
        raise DeserializeError(DeserializeErrorKind.EXPECTED_BOOL)

    def parse_unsigned(self) -> int:
        """Read a run of decimal digits."""
        first = self.next_char()
        if not ("0" <= first <= "9"):
            raise DeserializeError(DeserializeErrorKind.EXPECTED_INTEGER)
        end = 0
        while end < len(self.input) and "0" <= self.input[end] <= "9":
            end += 1
        digits, self.input = first + self.input[:end], self.input[end:]
        return int(digits)

    def parse_string(self) -> str:
        """Read a double-quoted string, or text up to the next active delimiter."""
        if self.input.startswith('"'):
            self.input = self.input[1:]
            end = self.input.find('"')
            if end < 0:
                raise DeserializeError(DeserializeErrorKind.EOF)
            text, self.input = self.input[:end], self.input[end + 1 :]
            return text
        return self.until_delim()

    def until_delim(self) -> str:
        """Consume text up to (not including) any active delimiter."""
        position = next(
            (i for i, char in enumerate(self.input) if self._is_delimiter(char)), None
        )
        if position is None:
            text, self.input = self.input, ""
        else:
            text, self.input = self.input[:position], self.input[position:]
        return text

    def next_delimiter(self) -> Optional[bool]:
        """Consume the current delimiter if present.

        True: it was found and consumed. False: another active delimiter or the
        end of input follows. None: neither, which is a syntax error.
        """
        if not self._contexts:
            return None
        current = self._contexts[-1]
        if self.input.startswith(current):
            self.input = self.input[len(current) :]
            return True
        if not self.input or self._is_delimiter(self.input[0]):
            return False
        return None

    def _delimited(self, delim: str, parse_item: Callable[[Deserializer], T]) -> list[T]:
        items: list[T] = []
        first = True
        while True:
            self.enter(delim)
            found = self.next_delimiter()
            if found is False:
                self.exit()
                return items
            if found is None and not first:
                raise DeserializeError(DeserializeErrorKind.EXPECTED_ARRAY_COMMA)
            first = False
            items.append(parse_item(self))
            self.exit()

    def parse_seq(self, parse_item: Callable[[Deserializer], T]) -> list[T]:
        """Read comma-separated items."""
        return self._delimited(",", parse_item)

    def parse_tuple(self, parse_item: Callable[[Deserializer], T]) -> tuple[T, ...]:
        """Read hyphen-separated items."""
        return tuple(self._delimited("-", parse_item))

    def parse_option(self, parse_item: Callable[[Deserializer], T]) -> Optional[T]:
        """Read an item, or None when the line or input ends here."""
        if not self.input or self.input[0] == "\n":
            return None
        return parse_item(self)

    def map_entries(
        self, value_parser: Callable[[Deserializer, str], T]
    ) -> Iterator[tuple[str, T]]:
        """Yield ``(key, value)`` pairs from newline-separated ``KEY:VALUE`` lines.

        ``value_parser`` is called with this deserializer and the key, and reads
        the value.
        """
        first = True
        while True:
            self.enter("\n")
            while True:
                found = self.next_delimiter()
                if found is False:
                    self.exit()
                    return
                if found is None and not first:
                    raise DeserializeError(DeserializeErrorKind.EXPECTED_MAP_NEWLINE)
                if not self.input:
                    self.exit()
                    return
                if self.input[0] != "\n":
                    break
            first = False

            self.enter(":")
            key = self.parse_string()
            if self.next_char() != ":":
                raise DeserializeError(DeserializeErrorKind.EXPECTED_MAP_COLON)
            self.exit()
            value = value_parser(self, key)
            self.exit()
            yield key, value


def from_str(text: str, parse: Callable[[Deserializer], T]) -> T:
    """Read ``text`` with ``parse``, requiring that all of it is consumed."""
    deserializer = Deserializer(text)
    result = parse(deserializer)
    if deserializer.input:
        raise DeserializeError(DeserializeErrorKind.TRAILING_CHARACTERS)
    return result