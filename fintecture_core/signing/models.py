"""
Signing Models
==============
Data models and enums for request signing and webhook verification.
"""

from collections.abc import MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union


class SignatureAlgorithm(str, Enum):
    """Signature algorithms accepted by the signer."""
    RSA_SHA256 = "rsa-sha256"


DEFAULT_ALGORITHM = SignatureAlgorithm.RSA_SHA256


class HeaderSet(MutableMapping):
    """
    Case-insensitive header mapping.

    Lookups ignore case. Iteration yields names as first inserted; setting
    a name that differs only in case replaces the value and keeps the
    original spelling.
    """

    def __init__(self, headers: Optional[Union[Mapping[str, str], List[Tuple[str, str]]]] = None):
        self._store: Dict[str, Tuple[str, str]] = {}
        if headers:
            items = headers.items() if isinstance(headers, Mapping) else headers
            for name, value in items:
                self[name] = value

    def __setitem__(self, name: str, value: str) -> None:
        key = name.lower()
        original = self._store[key][0] if key in self._store else name
        self._store[key] = (original, value)

    def __getitem__(self, name: str) -> str:
        return self._store[name.lower()][1]

    def __delitem__(self, name: str) -> None:
        del self._store[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._store

    def __repr__(self) -> str:
        return f"HeaderSet({dict(self.items())!r})"

    def to_dict(self) -> Dict[str, str]:
        """Plain dict with the original header spellings."""
        return dict(self.items())


@dataclass(frozen=True)
class SignatureComponents:
    """The four components of a parsed Signature header."""
    key_id: str
    algorithm: str
    headers: str
    signature: str

    @property
    def header_names(self) -> List[str]:
        """Signed header names, lowercased, in declared order."""
        return self.headers.lower().split()


class ParseFailureReason(str, Enum):
    """Reasons a Signature header could not be parsed."""
    MISSING_HEADER = "missing_header"
    SYNTAX = "syntax"
    MISSING_COMPONENTS = "missing_components"


@dataclass(frozen=True)
class ParsedSignature:
    """Successful parse of a Signature header."""
    components: SignatureComponents
    ok: bool = True


@dataclass(frozen=True)
class SignatureParseFailure:
    """Failed parse of a Signature header."""
    reason: ParseFailureReason
    message: str
    ok: bool = False


SignatureParseResult = Union[ParsedSignature, SignatureParseFailure]
