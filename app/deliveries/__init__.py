"""Delivery domain services.

Managers wrap the per-request lookup chains for delivery problems and
deliverymen.  They raise ``KeyError`` for missing rows, ``ValueError`` for
state conflicts and ``PermissionError`` for ownership mismatches; routes map
all three to HTTP 400 responses.
"""
