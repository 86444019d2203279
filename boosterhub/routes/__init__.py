"""
HTTP route modules
"""
