"""URL validation for navigable attribute values.

A candidate is resolved against a base location the way a browser resolves an
attribute value against the current document, then checked against the
protocol allowlist:
- Missing value is rejected
- Unparseable input is rejected, carrying the parse error as cause
- Schemes in the allowlist are accepted
- Plain http is accepted only for localhost
- Everything else is rejected, naming the offending scheme

Pre-processing follows the WHATWG URL parser: leading/trailing C0 control
characters and spaces are stripped, tab and newline characters are removed
anywhere (so "java\\tscript:" is seen as "javascript:"), backslashes in http(s),
ftp and ws(s) URLs are read as slashes, and the scheme is
compared lowercased.
"""

import re
from urllib.parse import SplitResult, urljoin, urlsplit

from xsspolicy.errors import PolicyErrorCode, ValidationError
from xsspolicy.protocols import ProtocolAllowlist

# Base location used when the host application does not supply one
DEFAULT_BASE_URL = "https://localhost/"

MISSING_VALUE_REASON = "no value given for dangerous URL attribute"

# Schemes that cannot be parsed without a host
SPECIAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

# Hosts allowed over unencrypted http
LOCAL_HTTP_HOSTS = frozenset({"localhost"})

_C0_CONTROL_OR_SPACE = "".join(chr(c) for c in range(0x21))
_TAB_OR_NEWLINE_RE = re.compile(r"[\t\n\r]")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")


def missing_value_error(tag: str, attribute: str) -> ValidationError:
    """Build the rejection for a dangerous attribute requested without a value."""
    return ValidationError(
        tag,
        attribute,
        MISSING_VALUE_REASON,
        code=PolicyErrorCode.E_DANGEROUS_ATTRIBUTE_MISSING_VALUE,
    )


def parse_url(candidate: str, base_url: str) -> SplitResult:
    """Parse a candidate URL, resolving relative references against base_url.

    Args:
        candidate: Raw attribute value.
        base_url: Absolute URL of the document the value will appear in.

    Returns:
        The resolved URL, split into components.

    Raises:
        ValueError: If the candidate cannot be parsed.
    """
    cleaned = _TAB_OR_NEWLINE_RE.sub("", candidate.strip(_C0_CONTROL_OR_SPACE))

    match = _SCHEME_RE.match(cleaned)
    scheme = match.group(1) if match else urlsplit(base_url).scheme
    if scheme.lower() in SPECIAL_SCHEMES:
        # Browsers read "\" as "/" in special URLs, so it can end the host
        cleaned = cleaned.replace("\\", "/")

    if match:
        parsed = urlsplit(cleaned)
        if scheme.lower() in SPECIAL_SCHEMES and not parsed.hostname:
            raise ValueError(f"missing host for {parsed.scheme}: URL")
    else:
        parsed = urlsplit(urljoin(base_url, cleaned))

    # Accessing port validates it (raises ValueError when out of range)
    _ = parsed.port
    return parsed


class URLValidator:
    """Checks single URL candidates against a protocol allowlist."""

    def __init__(self, protocols: ProtocolAllowlist, base_url: str = DEFAULT_BASE_URL):
        self.protocols = protocols
        self.base_url = base_url

    def validate(self, tag: str, attribute: str, value: str | None) -> None:
        """Validate a single URL candidate.

        Raises:
            ValidationError: E_DANGEROUS_ATTRIBUTE_MISSING_VALUE, E_INVALID_URL,
                E_UNENCRYPTED_HTTP or E_DISALLOWED_PROTOCOL.
        """
        if value is None:
            raise missing_value_error(tag, attribute)

        try:
            url = parse_url(value, self.base_url)
        except ValueError as e:
            raise ValidationError(
                tag,
                attribute,
                f"invalid URL [{value}]",
                code=PolicyErrorCode.E_INVALID_URL,
                cause=e,
            ) from e

        protocol = url.scheme + ":"
        if protocol in self.protocols:
            return

        if protocol == "http:":
            if url.hostname in LOCAL_HTTP_HOSTS:
                return
            raise ValidationError(
                tag,
                attribute,
                "using unencrypted http",
                code=PolicyErrorCode.E_UNENCRYPTED_HTTP,
            )

        raise ValidationError(
            tag,
            attribute,
            f"invalid protocol {protocol}",
            code=PolicyErrorCode.E_DISALLOWED_PROTOCOL,
        )
