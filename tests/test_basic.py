"""Tests for the kube_api_timeline package."""

import pytest


def test_package_import():
    """Test that the package can be imported."""
    import kube_api_timeline
    assert kube_api_timeline.__version__ == "0.1.0"


def test_cli_import():
    """Test that CLI module can be imported."""
    from kube_api_timeline.cli import main
    assert callable(main)


def test_create_timeline_is_exported():
    from kube_api_timeline import TimelineError, create_timeline
    assert callable(create_timeline)
    assert issubclass(TimelineError, Exception)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
