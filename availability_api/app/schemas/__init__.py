"""
Schema definitions for API payloads and domain values.

Wire models (Pydantic) are kept separate from the ``TimeSlot`` value
that the validator produces and the store holds.
"""
