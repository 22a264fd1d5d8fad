"""
Service layer abstraction.

The validator and slot store are capability interfaces with a single
in‑memory implementation each.  ``AvailabilityService`` orchestrates
them and is what the HTTP endpoints call, so the orchestration can be
exercised against substitute implementations in tests.
"""
