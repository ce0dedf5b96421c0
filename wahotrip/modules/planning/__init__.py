"""
modules/planning package: prompt, completion repair, assembly, fallback, costing and editing.
"""
