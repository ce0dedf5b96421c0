"""
modules package: planning, resource access, session state, reporting, observability.
"""
