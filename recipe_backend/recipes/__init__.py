"""
Recipe core.

Responsibilities:
- Hold recipes, favorites and shopping lists behind a swappable store.
- Match a set of on-hand ingredients against every recipe and rank them.
- Filter matches by cuisine, diet and total cooking time.
- Build shopping lists from the ingredients a recipe still needs.
"""
