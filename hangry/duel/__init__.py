"""
Duel mode.

Responsibilities:
- Run a randomised single-elimination reduction over a candidate subset.
- Expose the tournament state to the HTTP layer.
"""
