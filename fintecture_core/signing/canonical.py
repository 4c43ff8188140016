"""
Canonical Signing String
========================
Builds the newline-joined ``name: value`` string that is signed or checked.

Format (one line per header, joined with a newline):
    {name}: {value}

Where names are lowercased and appear in the given signing order. Names with
no value in the header set are skipped.
"""

from typing import Iterable, List, Mapping, Optional, Tuple

from .models import HeaderSet

REQUEST_TARGET = "(request-target)"


def _as_header_set(headers: Mapping[str, str]) -> HeaderSet:
    return headers if isinstance(headers, HeaderSet) else HeaderSet(headers)


def _signed_pairs(
    headers: Mapping[str, str],
    ordered_names: Iterable[str],
    request_target: Optional[str] = None,
    skip_empty: bool = False,
) -> List[Tuple[str, str]]:
    header_set = _as_header_set(headers)
    pairs = []
    for name in ordered_names:
        lowered = name.lower()
        if lowered == REQUEST_TARGET and request_target is not None:
            value = request_target
        else:
            value = header_set.get(name)
        if value is None or (skip_empty and value == ""):
            continue
        pairs.append((lowered, value))
    return pairs


def canonicalize(
    headers: Mapping[str, str],
    ordered_names: Iterable[str],
    request_target: Optional[str] = None,
    skip_empty: bool = False,
) -> str:
    """
    Build the canonical signing string.

    Args:
        headers: Header names to values; lookup ignores case
        ordered_names: Header names in signing order
        request_target: Value for ``(request-target)``; when None it is
            looked up in headers like any other name
        skip_empty: Also skip headers whose value is the empty string

    Returns:
        Canonical signing string
    """
    return "\n".join(
        f"{name}: {value}"
        for name, value in _signed_pairs(headers, ordered_names, request_target, skip_empty)
    )


def signed_header_names(
    headers: Mapping[str, str],
    ordered_names: Iterable[str],
    request_target: Optional[str] = None,
    skip_empty: bool = False,
) -> List[str]:
    """Lowercased names that ``canonicalize`` emits, in order."""
    pairs = _signed_pairs(headers, ordered_names, request_target, skip_empty)
    return [name for name, _ in pairs]
