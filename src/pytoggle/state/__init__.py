"""State/engine layer.

This package is the single authority for how change requests are resolved,
reduced, and either committed to a widget's internal state bag or surfaced
to the consumer that controls a key.
"""
