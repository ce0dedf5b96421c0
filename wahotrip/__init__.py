"""
wahotrip
--------
Backend for the UAE trip planner: preferences intake, AI / fallback itinerary
generation, day customization, cost summaries and the admin surface.
"""

__version__ = "1.0.0"
