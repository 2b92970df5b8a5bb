"""Attribute value handlers.

A handler is bound to an attribute name and runs before the generic allowlist
check, whichever tag is being checked. Handler approval is necessary but not
sufficient: the attribute must still be allowlisted afterwards.

Built-in handlers are frozen dataclasses so a registry can be inspected and
compared as data:
- SingleURLHandler: the whole value is one URL (href, src, ...)
- MetaContentURLHandler: <meta content="5; url=..."> refresh targets
- SrcsetHandler: comma-separated candidates with descriptors
- ArchiveHandler: tag-specific separated URL lists (object, applet)
- ExtensionHandler: wraps host-supplied logic
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from xsspolicy.errors import PolicyErrorCode, ValidationError
from xsspolicy.urls import URLValidator, missing_value_error

HandlerFunc = Callable[[str, str, str | None], None]

# Attributes whose entire value is a single URL
URL_ATTRIBUTES = (
    "action",
    "background",
    "cite",
    "classid",
    "codebase",
    "data",
    "dynsrc",
    "formaction",
    "href",
    "longdesc",
    "lowsrc",
    "poster",
    "profile",
    "src",
    "usemap",
)

_WHITESPACE_RE = re.compile(r"\s+")


class AttributeHandler(ABC):
    """Validation routine for the value of one attribute."""

    @abstractmethod
    def validate(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        """Raise ValidationError to reject; return normally to pass."""


@dataclass(frozen=True)
class SingleURLHandler(AttributeHandler):
    def validate(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        urls.validate(tag, attribute, value)


@dataclass(frozen=True)
class MetaContentURLHandler(AttributeHandler):
    """Checks the refresh target in a meta content value.

    Only applies to the configured tag; other tags pass through untouched.
    A value without a `url=` part carries no URL and is accepted.
    """

    tag: str = "meta"
    marker: str = "url="

    def validate(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        if tag != self.tag:
            return
        if value is None:
            raise missing_value_error(tag, attribute)
        parts = value.split(self.marker)
        if len(parts) < 2:
            return
        urls.validate(tag, attribute, parts[1])


@dataclass(frozen=True)
class SrcsetHandler(AttributeHandler):
    """Checks every image candidate URL in a srcset value.

    Descriptors (1x, 2x, 480w) are discarded; the first failing candidate
    rejects the whole value.
    """

    def validate(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        if value is None:
            raise missing_value_error(tag, attribute)
        for candidate in value.strip().split(","):
            url = _WHITESPACE_RE.split(candidate.strip(), maxsplit=1)[0]
            urls.validate(tag, attribute, url)


@dataclass(frozen=True)
class ArchiveHandler(AttributeHandler):
    """Checks each URL of an archive list using a tag-specific separator.

    Tags without a configured separator pass through untouched.
    """

    separators: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({"object": ",", "applet": " "})
    )

    def validate(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        separator = self.separators.get(tag)
        if separator is None:
            return
        if value is None:
            raise missing_value_error(tag, attribute)
        for segment in value.split(separator):
            if segment != "":
                urls.validate(tag, attribute, segment)


class ExtensionHandler(AttributeHandler):
    """Wraps a host-supplied callable `(tag, attribute, value) -> None`.

    The callable rejects by raising. A ValidationError propagates unchanged;
    any other exception becomes a ValidationError with code E_HANDLER_REJECTED,
    the exception's text as message and the exception as cause.
    """

    def __init__(self, func: HandlerFunc):
        self.func = func

    def validate(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        try:
            self.func(tag, attribute, value)
        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError(
                tag,
                attribute,
                str(e) or type(e).__name__,
                code=PolicyErrorCode.E_HANDLER_REJECTED,
                cause=e,
            ) from e

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ExtensionHandler) and other.func == self.func

    def __hash__(self) -> int:
        return hash(self.func)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"ExtensionHandler({name})"


def as_handler(handler: AttributeHandler | HandlerFunc) -> AttributeHandler:
    """Return handler as an AttributeHandler, wrapping plain callables."""
    if isinstance(handler, AttributeHandler):
        return handler
    if not callable(handler):
        raise TypeError(f"handler must be an AttributeHandler or callable, got {handler!r}")
    return ExtensionHandler(handler)


class HandlerRegistry:
    """Mapping from attribute name to its value handler."""

    def __init__(self, handlers: Mapping[str, AttributeHandler] | None = None):
        self._handlers: dict[str, AttributeHandler] = dict(handlers or {})

    @classmethod
    def default(cls) -> "HandlerRegistry":
        """Registry with the built-in URL handlers."""
        registry = cls()
        for attribute in URL_ATTRIBUTES:
            registry.register(attribute, SingleURLHandler())
        registry.register("content", MetaContentURLHandler())
        registry.register("srcset", SrcsetHandler())
        registry.register("archive", ArchiveHandler())
        return registry

    def register(
        self, attribute: str, handler: AttributeHandler | HandlerFunc
    ) -> AttributeHandler | None:
        """Install handler for attribute, replacing any existing one.

        Returns:
            The replaced handler, or None.
        """
        previous = self._handlers.get(attribute)
        self._handlers[attribute] = as_handler(handler)
        return previous

    def get(self, attribute: str) -> AttributeHandler | None:
        return self._handlers.get(attribute)

    def dispatch(self, tag: str, attribute: str, value: str | None, urls: URLValidator) -> None:
        """Run the handler registered for attribute, if any."""
        handler = self._handlers.get(attribute)
        if handler is not None:
            handler.validate(tag, attribute, value, urls)

    def copy(self) -> "HandlerRegistry":
        return HandlerRegistry(self._handlers)

    def __contains__(self, attribute: object) -> bool:
        return attribute in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._handlers))

    def __len__(self) -> int:
        return len(self._handlers)
