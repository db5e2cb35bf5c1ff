"""
Convivio - Dinner planning and wine pairing from your own cellar.

Pipeline:
- Inventory snapshot -> prompt assembly -> completion -> decode
- Partial regeneration of single dishes and wines
- Availability matching against the live cellar
"""

__version__ = "1.0.0"
