"""Tests for access code generation."""

import pytest

from collab_access.services.codes import (
    CODE_ALPHABET,
    SHARE_KEY_LENGTH,
    SecretsCodeGenerator,
)


def test_codes_use_alphabet_and_length() -> None:
    generator = SecretsCodeGenerator()

    code = generator.generate()

    assert len(code) == 10
    assert set(code) <= set(CODE_ALPHABET)


def test_alphabet_has_no_ambiguous_symbols() -> None:
    assert not set("01OIL") & set(CODE_ALPHABET)


def test_ten_thousand_codes_do_not_collide() -> None:
    generator = SecretsCodeGenerator()

    codes = {generator.generate() for _ in range(10_000)}

    assert len(codes) == 10_000


def test_share_keys_are_longer() -> None:
    assert len(SecretsCodeGenerator(SHARE_KEY_LENGTH).generate()) == 16


@pytest.mark.parametrize(
    ("length", "alphabet"),
    [(5, CODE_ALPHABET), (10, "ABCDEF")],
)
def test_weak_generators_are_refused(length: int, alphabet: str) -> None:
    with pytest.raises(ValueError):
        SecretsCodeGenerator(length, alphabet)
