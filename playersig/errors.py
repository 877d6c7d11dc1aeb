"""
Exception types raised by playersig.

Extraction-level errors (ExtractionFailed, UnbalancedInputError, FetchFailed)
abort a whole batch. FormatError subclasses only concern a single descriptor
and are collected by the batch runner instead of being raised.
"""
from __future__ import annotations
from typing import Optional


class PlayerSigError(Exception):
    """Base class for every error raised by this package."""


class ExtractionFailed(PlayerSigError):
    def __init__(self, player_url: str, message: str = "Could not extract functions"):
        self.player_url = player_url
        super().__init__(f"{message}: {player_url}")


class UnbalancedInputError(PlayerSigError):
    """Bracket scanning ran off the end of the input (or never started)."""


class FetchFailed(PlayerSigError):
    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        self.reason = reason
        prefix = f"HTTP {status}" if status is not None else "fetch error"
        super().__init__(f"{prefix} for {url}: {reason}")


class FormatError(PlayerSigError):
    """A single format descriptor could not be resolved."""


class ExecutionFailed(FormatError):
    def __init__(self, argument: str, reason: str):
        self.argument = argument
        self.reason = reason
        super().__init__(f"{argument} transform failed: {reason}")


class MalformedFormat(FormatError):
    pass
