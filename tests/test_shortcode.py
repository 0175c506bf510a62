"""Tests for short code generation."""

import random
import re

import pytest
from shortlinks.shortcode import ShortCodeGenerator

_BASE62_RE = re.compile(r"[0-9a-zA-Z]+")


class TestShortCodeGenerator:
    """Test short code generation."""

    def test_generate_default_length(self):
        """Generated codes are 6 base62 characters by default."""
        generator = ShortCodeGenerator()

        for _ in range(200):
            code = generator.generate()
            assert len(code) == 6
            assert _BASE62_RE.fullmatch(code)

    def test_generate_custom_length(self):
        """Test random code with custom length."""
        generator = ShortCodeGenerator(default_length=6)

        assert len(generator.generate(length=10)) == 10
        assert len(ShortCodeGenerator(default_length=8).generate()) == 8

    def test_callable_matches_generate(self):
        generator = ShortCodeGenerator(default_length=7, rng=random.Random(42))
        code = generator()
        assert len(code) == 7

    def test_seeded_source_is_deterministic(self):
        """Generation is a pure function of the random source."""
        a = ShortCodeGenerator(rng=random.Random(1234))
        b = ShortCodeGenerator(rng=random.Random(1234))

        assert [a.generate() for _ in range(5)] == [b.generate() for _ in range(5)]

    def test_alphabet_is_base62(self):
        assert len(ShortCodeGenerator.BASE62_CHARS) == 62
        assert set(ShortCodeGenerator.BASE62_CHARS) == set(
            "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
        )

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            ShortCodeGenerator(default_length=0)

    def test_is_valid_format(self):
        """Test format validation."""
        assert ShortCodeGenerator.is_valid_format("abc123")
        assert ShortCodeGenerator.is_valid_format("ABCxyz")

        # Invalid formats
        assert not ShortCodeGenerator.is_valid_format("")
        assert not ShortCodeGenerator.is_valid_format("abc 123")
        assert not ShortCodeGenerator.is_valid_format("abc-123")
        assert not ShortCodeGenerator.is_valid_format("abc_123")
        assert not ShortCodeGenerator.is_valid_format("abc@123")
