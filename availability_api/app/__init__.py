"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules.  The validator and slot store live under ``services``,
wire schemas under ``schemas`` and the HTTP adapter under
``api/v1/endpoints``.
"""
