"""Allowlist policy engine deciding which HTML tags, attributes and values are safe to emit."""

from xsspolicy.config import Settings, get_settings
from xsspolicy.errors import (
    PolicyError,
    PolicyErrorCode,
    ProtocolRequiredError,
    UnknownProfileError,
    ValidationError,
)
from xsspolicy.handlers import (
    ArchiveHandler,
    AttributeHandler,
    ExtensionHandler,
    HandlerRegistry,
    MetaContentURLHandler,
    SingleURLHandler,
    SrcsetHandler,
)
from xsspolicy.logging import configure_logging
from xsspolicy.policy import (
    NO_EXTRA_ATTRIBUTES,
    Attributes,
    NoExtraAttributes,
    PolicyStore,
    RejectHook,
    TagPolicy,
)
from xsspolicy.profiles import BASIC_PROFILE, HTML5_PROFILE, PolicyProfile, get_profile
from xsspolicy.protocols import ProtocolAllowlist
from xsspolicy.urls import URLValidator


def create_store(
    settings: Settings | None = None,
    *,
    on_reject: RejectHook | None = None,
    setup_logging: bool = False,
) -> PolicyStore:
    """Build a PolicyStore from settings (environment by default).

    Uses the configured profile and base URL, then permits any extra protocols.
    With setup_logging, also configures structlog output (JSON unless
    XSSPOLICY_LOG_JSON is false); host applications with their own logging
    setup leave it off.
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(json_format=settings.log_json)
    store = PolicyStore.from_profile(
        get_profile(settings.profile),
        base_url=settings.base_url,
        on_reject=on_reject,
    )
    for protocol in settings.protocol_list:
        store.add_protocol(protocol)
    return store


__all__ = [
    "BASIC_PROFILE",
    "HTML5_PROFILE",
    "NO_EXTRA_ATTRIBUTES",
    "ArchiveHandler",
    "AttributeHandler",
    "Attributes",
    "ExtensionHandler",
    "HandlerRegistry",
    "MetaContentURLHandler",
    "NoExtraAttributes",
    "PolicyError",
    "PolicyErrorCode",
    "PolicyProfile",
    "PolicyStore",
    "ProtocolAllowlist",
    "ProtocolRequiredError",
    "RejectHook",
    "Settings",
    "SingleURLHandler",
    "SrcsetHandler",
    "TagPolicy",
    "URLValidator",
    "UnknownProfileError",
    "ValidationError",
    "create_store",
    "get_profile",
    "get_settings",
]
