"""
Top‑level package for the Availability API.

This file makes ``availability_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``availability_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
