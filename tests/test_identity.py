"""
Tests for short identifier generation.
"""

import pytest

from nodetree.core.services.identity import short_id


def test_length_and_alphabet():
    value = short_id(8)
    assert len(value) == 8
    assert value.isalnum()


def test_ids_differ():
    assert len({short_id(6) for _ in range(50)}) > 1


def test_invalid_length():
    with pytest.raises(ValueError):
        short_id(0)
