"""
Root conftest.py for pytest configuration

This file handles:
1. Automatic marker inheritance based on test location
2. Marker registration
"""
from tests.markers import DOMAIN_MARKERS, OTHER_MARKERS, PRIMARY_MARKERS, apply_auto_markers


def pytest_collection_modifyitems(config, items):
    """Apply automatic markers based on test location"""
    for item in items:
        apply_auto_markers(item)


def pytest_configure(config):
    """
    Configure pytest with custom markers.

    This registers primary, domain and auxiliary markers dynamically.
    """
    for marker_name in sorted(PRIMARY_MARKERS):
        config.addinivalue_line("markers", f"{marker_name}: {marker_name} tests")

    for marker_name, description in DOMAIN_MARKERS.items():
        config.addinivalue_line("markers", f"{marker_name}: {description}")

    for marker_name in sorted(OTHER_MARKERS):
        config.addinivalue_line("markers", f"{marker_name}: {marker_name} tests")
