"""Test module for xsd_completion package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xsd_completion

    # Assert
    assert xsd_completion is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xsd_completion

    # Assert
    assert isinstance(xsd_completion.__version__, str)
    assert xsd_completion.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import xsd_completion

    # Assert
    assert xsd_completion.__author__ == "XSD Completion Team"


def test_package_all_exports_resolve() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import xsd_completion

    # Assert
    for name in xsd_completion.__all__:
        assert hasattr(xsd_completion, name), name
    assert "complete" in xsd_completion.__all__
    assert "XsdCompletionEngine" in xsd_completion.__all__
