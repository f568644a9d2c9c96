"""
Ad ROI Architect - personal marketing simulation tool
"""

__version__ = "1.0.0"
