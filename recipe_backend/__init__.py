"""
Pantry recipe finder backend.

Users enter the ingredients they have on hand, get back recipes ranked by
how many of the required ingredients they already own, and can keep
favorites and shopping lists for whatever is missing.
"""
