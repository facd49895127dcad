"""
HTTP request layer.
"""
