"""Tests for formation.__init__ — lazy import registry covers all public names."""

import pytest

import formation


@pytest.mark.parametrize("name", formation.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(formation, name)
    assert obj is not None, f"formation.{name} resolved to None"


def test_all_names_in_lazy_registry() -> None:
    missing = set(formation.__all__) - set(formation._LAZY_IMPORTS)
    assert not missing, f"Names in __all__ but not in _LAZY_IMPORTS: {sorted(missing)}"


def test_lazy_registry_no_extras() -> None:
    extras = set(formation._LAZY_IMPORTS) - set(formation.__all__)
    assert not extras, f"Names in _LAZY_IMPORTS but not in __all__: {sorted(extras)}"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        formation.__getattr__("ThisDoesNotExist")


def test_validate_is_the_validation_entry_point() -> None:
    from formation.validation import validate

    assert formation.validate is validate
