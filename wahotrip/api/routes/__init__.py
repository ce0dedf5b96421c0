"""
api/routes package: one router per URL prefix.
"""
