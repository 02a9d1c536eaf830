"""Conversion error hierarchy.

Every error raised while turning one drawable into draw commands derives from
``ConversionError`` and carries the id of the element it happened in, so the
caller can report a precise message or skip that element.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for errors terminal to a single drawable."""

    kind = "ConversionError"

    def __init__(self, message: str, element_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.element_id = element_id

    def with_element(self, element_id: str) -> ConversionError:
        """Attach the element id if none was recorded yet. Returns self."""
        if self.element_id is None:
            self.element_id = element_id
        return self

    def __str__(self) -> str:
        if self.element_id:
            return f"{self.element_id}: {self.message}"
        return self.message


class PathGrammarError(ConversionError):
    """Path-data errors; remembers the offending token and its offset."""

    def __init__(
        self,
        message: str,
        token: str = "",
        offset: int = -1,
        element_id: str | None = None,
    ) -> None:
        if offset >= 0:
            message = f"{message} (token {token!r} at offset {offset})"
        super().__init__(message, element_id)
        self.token = token
        self.offset = offset


class PathSyntaxError(PathGrammarError):
    kind = "SyntaxError"


class UnsupportedCommand(PathGrammarError):
    kind = "UnsupportedCommand"


class ArityError(PathGrammarError):
    kind = "ArityError"


class InvalidColor(ConversionError):
    kind = "InvalidColor"

    def __init__(self, value: str, element_id: str | None = None) -> None:
        super().__init__(f"Invalid color {value!r}", element_id)
        self.value = value


class InvalidAttribute(ConversionError):
    kind = "InvalidAttribute"

    def __init__(self, name: str, value: str, element_id: str | None = None) -> None:
        super().__init__(f"Invalid value {value!r} for attribute {name!r}", element_id)
        self.name = name
        self.value = value


class CoordinateOverflow(ConversionError):
    kind = "CoordinateOverflow"

    def __init__(self, value: float, limit: tuple[int, int], element_id: str | None = None) -> None:
        super().__init__(
            f"Coordinate {value!r} outside representable range [{limit[0]}, {limit[1]}]",
            element_id,
        )
        self.value = value
        self.limit = limit


class EncodingOverflow(ConversionError):
    kind = "EncodingOverflow"

    def __init__(self, field: str, value: int, maximum: int, element_id: str | None = None) -> None:
        super().__init__(f"{field} {value} exceeds format maximum {maximum}", element_id)
        self.field = field
        self.value = value
        self.maximum = maximum


class UnsupportedElement(ConversionError):
    kind = "UnsupportedElement"

    def __init__(self, tag: str, element_id: str | None = None) -> None:
        super().__init__(f"Unsupported element <{tag}>", element_id)
        self.tag = tag


class DocumentError(Exception):
    """Markup that cannot be read as an SVG document."""


class PdcDecodeError(Exception):
    """Bytes that are not a valid draw command image."""
