"""Pattern model — segments, the validating builder, and template parsing.

Patterns are assembled once, validated as they grow, and immutable after
``build()``.
"""
