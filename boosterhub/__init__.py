"""
BoosterHub
Booster club payment settings service
"""

__version__ = "1.0.0"
