"""Opaque access code generation."""

import secrets
from dataclasses import dataclass
from typing import Protocol

# Upper-case letters and digits without 0/O, 1/I/L.
CODE_ALPHABET = "23456789ABCDEFGHJKMNPQRSTUVWXYZ"

ACCESS_CODE_LENGTH = 10
SHARE_KEY_LENGTH = 16


class CodeGenerator(Protocol):
    """Interface for producing opaque capability codes."""

    def generate(self) -> str:
        """Return a fresh unguessable code."""


@dataclass(frozen=True)
class SecretsCodeGenerator(CodeGenerator):
    """Code generator backed by the ``secrets`` CSPRNG."""

    length: int = ACCESS_CODE_LENGTH
    alphabet: str = CODE_ALPHABET

    def __post_init__(self) -> None:
        if self.length < 6:
            raise ValueError("Code length must be at least 6")
        if len(set(self.alphabet)) < 16:
            raise ValueError("Code alphabet must have at least 16 symbols")

    def generate(self) -> str:
        """Return a random code of ``length`` symbols."""
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))
