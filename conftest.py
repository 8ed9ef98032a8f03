"""
Pytest configuration: boots Django for the converter tests.
"""

import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "publishsite.settings")
django.setup()


def _pandoc_available():
    import pypandoc

    try:
        pypandoc.get_pandoc_version()
    except OSError:
        return False
    return True


def pytest_collection_modifyitems(config, items):
    """Skip tests marked requires_pandoc when no pandoc binary can be found."""
    if _pandoc_available():
        return
    skip = pytest.mark.skip(reason="pandoc is not installed")
    for item in items:
        if "requires_pandoc" in item.keywords:
            item.add_marker(skip)
