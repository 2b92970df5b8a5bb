"""Policy store and decision procedure.

A PolicyStore owns every policy collection (tag catalog, global attributes,
structural prefixes, protocols, attribute handlers) and decides whether a
(tag, attribute, value) triple may be emitted.

Decision order, stopping at the first rejection:
1. Unknown tag -> E_TAG_NOT_ALLOWED
2. No attribute requested -> allowed
3. Handler registered for the attribute runs (any tag); it may reject
4. Global attribute or structural prefix (data-, aria-) -> allowed
5. Attribute in the tag's own set -> allowed
6. Otherwise -> E_ATTRIBUTE_NOT_ALLOWED

Mutation is additive: no operation revokes a tag, attribute or protocol.
All collections are guarded by one reentrant lock, so a store may be shared
between threads that validate and threads that extend the policy.
"""

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from xsspolicy.errors import URL_ERROR_CODES, PolicyErrorCode, ValidationError
from xsspolicy.handlers import AttributeHandler, HandlerFunc, HandlerRegistry
from xsspolicy.logging import get_logger
from xsspolicy.profiles import HTML5_PROFILE, PolicyProfile
from xsspolicy.protocols import ProtocolAllowlist
from xsspolicy.urls import DEFAULT_BASE_URL, URLValidator

logger = get_logger(__name__)

RejectHook = Callable[[ValidationError], None]


@dataclass(frozen=True)
class NoExtraAttributes:
    """Tag is allowed but grants nothing beyond the global attributes."""

    def permits(self, attribute: str) -> bool:
        return False


@dataclass(frozen=True)
class Attributes:
    """Tag is allowed with its own attribute set."""

    names: frozenset[str]

    def permits(self, attribute: str) -> bool:
        return attribute in self.names


TagPolicy = NoExtraAttributes | Attributes

NO_EXTRA_ATTRIBUTES = NoExtraAttributes()


def log_rejection(error: ValidationError) -> None:
    """Default diagnostic hook for try_validate().

    Logs the rejection kind and reason. url_rejection marks failures of a URL
    check, as opposed to allowlist misses and host handler rejections.
    """
    logger.warning(
        "policy.rejected",
        tag=error.tag,
        attribute=error.attribute,
        code=error.code.value,
        url_rejection=error.code in URL_ERROR_CODES,
        reason=error.message,
    )


class PolicyStore:
    """Mutable allowlist policy with its decision procedure."""

    def __init__(
        self,
        tags: dict[str, TagPolicy] | None = None,
        global_attributes: Iterable[str] = (),
        structural_prefixes: Iterable[str] = ("data-",),
        protocols: ProtocolAllowlist | None = None,
        handlers: HandlerRegistry | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        on_reject: RejectHook | None = None,
    ):
        self._tags: dict[str, TagPolicy] = dict(tags or {})
        self._globals: set[str] = set(global_attributes)
        self._prefixes: tuple[str, ...] = tuple(structural_prefixes)
        self._protocols = protocols if protocols is not None else ProtocolAllowlist(["https:"])
        self._handlers = handlers if handlers is not None else HandlerRegistry.default()
        self._urls = URLValidator(self._protocols, base_url)
        self._on_reject: RejectHook = on_reject or log_rejection
        self._lock = threading.RLock()

    @classmethod
    def from_profile(
        cls,
        profile: PolicyProfile = HTML5_PROFILE,
        *,
        base_url: str = DEFAULT_BASE_URL,
        on_reject: RejectHook | None = None,
    ) -> "PolicyStore":
        """Build a store from a built-in profile with the default handlers."""
        tags: dict[str, TagPolicy] = {
            tag: Attributes(frozenset(attrs)) if attrs else NO_EXTRA_ATTRIBUTES
            for tag, attrs in profile.tags.items()
        }
        return cls(
            tags,
            profile.global_attributes,
            profile.structural_prefixes,
            ProtocolAllowlist(profile.protocols),
            HandlerRegistry.default(),
            base_url=base_url,
            on_reject=on_reject,
        )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._urls.base_url

    @property
    def tags(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._tags))

    @property
    def global_attributes(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._globals)

    @property
    def structural_prefixes(self) -> tuple[str, ...]:
        return self._prefixes

    @property
    def protocols(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._protocols)

    def lookup(self, tag: str) -> TagPolicy | None:
        """Return the tag's policy, or None for an unknown tag."""
        with self._lock:
            return self._tags.get(tag)

    def handler_for(self, attribute: str) -> AttributeHandler | None:
        with self._lock:
            return self._handlers.get(attribute)

    def is_globally_permitted(self, attribute: str) -> bool:
        """True for global attributes and structural-prefix attributes."""
        with self._lock:
            if attribute in self._globals:
                return True
        return attribute.startswith(self._prefixes)

    def is_permitted_for_tag(self, tag: str, attribute: str) -> bool:
        """True if the tag's own attribute set contains attribute."""
        policy = self.lookup(tag)
        return policy is not None and policy.permits(attribute)

    # -------------------------------------------------------------------------
    # Decision procedure
    # -------------------------------------------------------------------------

    def validate(self, tag: str, attribute: str | None = None, value: str | None = None) -> None:
        """Decide whether a (tag, attribute, value) triple may be emitted.

        Args:
            tag: Element name, matched exactly.
            attribute: Attribute name, or None to check the tag alone.
            value: Attribute value, or None when the attribute has no value.

        Raises:
            ValidationError: With a code identifying the kind of rejection.
        """
        with self._lock:
            policy = self._tags.get(tag)
            if policy is None:
                raise ValidationError(
                    tag,
                    attribute,
                    "not in tag whitelist",
                    code=PolicyErrorCode.E_TAG_NOT_ALLOWED,
                )

            if attribute is None:
                return

            self._handlers.dispatch(tag, attribute, value, self._urls)

            if self.is_globally_permitted(attribute):
                return

            if policy.permits(attribute):
                return

            raise ValidationError(
                tag,
                attribute,
                "not in attr whitelist",
                code=PolicyErrorCode.E_ATTRIBUTE_NOT_ALLOWED,
            )

    def try_validate(
        self, tag: str, attribute: str | None = None, value: str | None = None
    ) -> bool:
        """Boolean form of validate(); rejections go to the diagnostic hook."""
        try:
            self.validate(tag, attribute, value)
        except ValidationError as e:
            self._on_reject(e)
            return False
        return True

    # -------------------------------------------------------------------------
    # Mutation (additive only)
    # -------------------------------------------------------------------------

    def add_tag(self, tag: str, attributes: Iterable[str] = ()) -> None:
        """Allow a tag, optionally with extra attributes.

        - Known tag, attributes given: widen its set (NoExtraAttributes is replaced)
        - Known tag, no attributes: no-op (never narrows an existing set)
        - Unknown tag, attributes given: register with that set
        - Unknown tag, no attributes: register as NoExtraAttributes

        Raises:
            TypeError: If attributes is a single string rather than a collection.
        """
        if isinstance(attributes, str):
            raise TypeError(f"attributes must be a collection of names, got string {attributes!r}")
        attrs = frozenset(attributes)
        with self._lock:
            current = self._tags.get(tag)
            if current is None:
                self._tags[tag] = Attributes(attrs) if attrs else NO_EXTRA_ATTRIBUTES
            elif attrs:
                if isinstance(current, Attributes):
                    self._tags[tag] = Attributes(current.names | attrs)
                else:
                    self._tags[tag] = Attributes(attrs)
            else:
                return

        logger.debug("policy.tag_added", tag=tag, attributes=sorted(attrs))

    def add_global_attribute(self, attribute: str) -> None:
        """Allow attribute on every known tag."""
        with self._lock:
            self._globals.add(attribute)
        logger.debug("policy.global_attribute_added", attribute=attribute)

    def add_handler(self, attribute: str, handler: AttributeHandler | HandlerFunc) -> None:
        """Install the value handler for attribute, replacing any existing one.

        Built-in URL handlers may be replaced too. A plain callable
        `(tag, attribute, value) -> None` is wrapped in an ExtensionHandler.
        """
        with self._lock:
            previous = self._handlers.register(attribute, handler)
        if previous is not None:
            logger.info(
                "policy.handler_replaced",
                attribute=attribute,
                previous=type(previous).__name__,
            )

    def add_protocol(self, protocol: str) -> None:
        """Allow a URL scheme; "sftp" and "sftp:" are equivalent.

        Raises:
            ProtocolRequiredError: If protocol is empty.
        """
        with self._lock:
            stored = self._protocols.add(protocol)
        logger.debug("policy.protocol_added", protocol=stored)

    def copy(self) -> "PolicyStore":
        """Return an independent store with the same policy and hook."""
        with self._lock:
            return PolicyStore(
                dict(self._tags),
                self._globals,
                self._prefixes,
                self._protocols.copy(),
                self._handlers.copy(),
                base_url=self._urls.base_url,
                on_reject=self._on_reject,
            )
