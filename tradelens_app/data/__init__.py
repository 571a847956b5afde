"""
Data model and normalization module.

Typed market/decision models, numeric sanitization, tick-size snapping and
provider payload parsing.
"""
