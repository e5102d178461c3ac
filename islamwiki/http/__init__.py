"""
HTTP layer: middleware, controllers, error pages and response helpers.
"""
