"""
Proxy selection for outgoing requests.

A picker receives the caller-supplied candidate list and returns one proxy
URL. The default picker draws from the OS secure random source; tests
inject a deterministic picker instead.
"""

from __future__ import annotations

import secrets
from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomProxyPicker(Protocol):
    """Chooses one proxy from a non-empty candidate list."""

    def pick(self, candidates: Sequence[str]) -> str:
        ...


class SecureRandomProxyPicker:
    """Uniform pick backed by `secrets` (OS CSPRNG).

    A failure of the OS random source propagates unchanged; there is no
    fallback to a weaker generator.
    """

    def pick(self, candidates: Sequence[str]) -> str:
        if not candidates:
            raise ValueError("Cannot pick a proxy from an empty candidate list")
        return candidates[secrets.randbelow(len(candidates))]


def select_proxy(
    candidates: Sequence[str] | None,
    picker: RandomProxyPicker,
) -> str | None:
    """Pick a proxy if any candidates were supplied.

    Args:
        candidates: Proxy URLs such as "http://10.0.0.1:8080", or None.
        picker: Picker used when the list is non-empty.

    Returns:
        Chosen proxy URL, or None for a direct connection.
    """
    if not candidates:
        return None
    return picker.pick(candidates)
