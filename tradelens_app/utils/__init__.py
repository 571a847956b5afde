"""
Utility functions module.

Numeric coercion helpers shared by the sanitizer, the order-book normalizer
and the decision validator.
"""
