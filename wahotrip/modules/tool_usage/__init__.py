"""
modules/tool_usage package: Resource Store fetches for generation and customization.
"""
