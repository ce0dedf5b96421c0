"""
modules/reporting package: trip summary, booking save and admin analytics.
"""
