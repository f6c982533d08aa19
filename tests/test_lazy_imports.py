"""Tests for trellis.__init__ — every public name resolves lazily."""

import pytest

import trellis


@pytest.mark.parametrize("name", trellis.__all__)
def test_all_names_resolve(name: str) -> None:
    obj = getattr(trellis, name)
    assert obj is not None, f"trellis.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        trellis.__getattr__("ThisDoesNotExist")
