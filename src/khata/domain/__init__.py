"""Domain layer for khata.

Services are imported from their own modules (``khata.domain.transaction``,
``khata.domain.gst`` and so on) since the database layer imports entities
from this package.
"""
