"""Allowlist of URL schemes.

Schemes are stored in canonical `name:` form, matching what the URL parser
reports for a candidate (e.g. "https:").
"""

from collections.abc import Iterable, Iterator

from xsspolicy.errors import ProtocolRequiredError


def normalize_protocol(protocol: str) -> str:
    """Return the canonical `name:` form of a protocol.

    Raises:
        ProtocolRequiredError: If protocol is empty.
    """
    if protocol == "":
        raise ProtocolRequiredError()
    if not protocol.endswith(":"):
        protocol += ":"
    return protocol


class ProtocolAllowlist:
    """Set of permitted URL schemes. Additive only."""

    def __init__(self, protocols: Iterable[str] = ()):
        self._protocols: set[str] = set()
        for protocol in protocols:
            self.add(protocol)

    def add(self, protocol: str) -> str:
        """Add a protocol, appending ':' if absent. Returns the stored form."""
        normalized = normalize_protocol(protocol)
        self._protocols.add(normalized)
        return normalized

    def copy(self) -> "ProtocolAllowlist":
        return ProtocolAllowlist(self._protocols)

    def __contains__(self, protocol: object) -> bool:
        return protocol in self._protocols

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._protocols))

    def __len__(self) -> int:
        return len(self._protocols)

    def __repr__(self) -> str:
        return f"ProtocolAllowlist({sorted(self._protocols)!r})"
