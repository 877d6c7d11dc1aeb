"""
Core types for playersig.

  - FragmentPair: decipher / n-transform source extracted from one player script
  - FormatFailure: a descriptor that could not be resolved, with the reason
  - DecipheredFormats: resolved URL → descriptor mapping returned by a batch
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence

# A format descriptor is the caller's own dict (as decoded from player JSON).
FormatDescriptor = dict[str, Any]


# ──────────────────────────────
#  Extracted fragments
# ──────────────────────────────
@dataclass(frozen=True)
class FragmentPair:
    decipher: Optional[str] = None       # ends with `<fn>(sig);`
    n_transform: Optional[str] = None    # ends with `<fn>(ncode);`

    @property
    def is_empty(self) -> bool:
        return not self.decipher and not self.n_transform

    def to_list(self) -> list[str]:
        return [f for f in (self.decipher, self.n_transform) if f]

    @classmethod
    def from_list(cls, functions: Sequence[str]) -> "FragmentPair":
        """Build from the positional form: [decipher, n_transform]."""
        decipher = functions[0] if len(functions) > 0 else None
        n_transform = functions[1] if len(functions) > 1 else None
        return cls(decipher=decipher or None, n_transform=n_transform or None)


# ──────────────────────────────
#  Batch output
# ──────────────────────────────
@dataclass
class FormatFailure:
    format: FormatDescriptor
    error: Exception

    def to_dict(self):
        return {
            "itag": self.format.get("itag"),
            "error": type(self.error).__name__,
            "reason": str(self.error),
        }


class DecipheredFormats(dict):
    """Resolved URL → format descriptor, plus the descriptors that failed."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.failures: list[FormatFailure] = []

    @property
    def ok(self) -> bool:
        return not self.failures
