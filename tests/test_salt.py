"""Tests for filename salt generation."""

import random

from qname.filename import SALT_CHARSET, SALT_LENGTH, gen_salt


def test_salt_uses_restricted_charset() -> None:
    salt = gen_salt(random.Random(1))

    assert len(salt) == SALT_LENGTH == 6
    assert set(salt) <= set(SALT_CHARSET)


def test_charset_excludes_confusable_symbols() -> None:
    assert len(SALT_CHARSET) == 34
    assert "O" not in SALT_CHARSET
    assert "0" not in SALT_CHARSET


def test_seeded_generators_repeat() -> None:
    assert gen_salt(random.Random(42)) == gen_salt(random.Random(42))


def test_salts_vary_between_draws() -> None:
    rng = random.Random(7)

    salts = {gen_salt(rng) for _ in range(50)}

    assert len(salts) > 45


def test_custom_length_and_default_generator() -> None:
    assert len(gen_salt(length=10)) == 10
    assert set(gen_salt()) <= set(SALT_CHARSET)
