"""Exceptions raised by the ChainResolver tools."""

from __future__ import annotations


class MalformedIdentifierError(ValueError):
    """Chain identifier input is neither hexadecimal nor decimal."""


class AnswerDecodeError(ValueError):
    """A resolver answer is not the ABI encoding of the expected return type."""


class ResolverTransportError(RuntimeError):
    """The resolver could not be reached, reverted, or has no code."""


class ResolverNotFoundError(RuntimeError):
    """No ChainResolver address could be located."""
