"""
modules/observability package: JSONL event log per session.
"""
