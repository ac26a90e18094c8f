"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, errors and the city
store), ``schemas`` (request and response models), ``services``
(validation and mutation logic) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
