"""
iReporter - Client Core
Report submission, tracking, media handling and location search against the
iReporter API.
"""

__version__ = "0.3.0"
