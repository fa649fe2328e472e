"""
HSE photo inspection client.

Acquire a photo, upload it, submit it for hazard analysis and turn the
result into a presentable safety report.
"""

__version__ = "1.0.0"
