"""
Root pytest configuration for the Django project.

pytest-django configures Django from DJANGO_SETTINGS_MODULE (set in
pyproject.toml). Project-wide fixtures and markers live in app/conftest.py;
app-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
