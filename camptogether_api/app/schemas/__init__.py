"""
Pydantic schema definitions for API payloads.

Request schemas double as the validation layer: a body that fails them is
rejected with a 400 and a list of field-level issues before any service
code runs.
"""
