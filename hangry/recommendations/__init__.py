"""
Preference-driven recommendation engine.

Responsibilities:
- Turn the swipe history into an affinity profile.
- Score and filter the candidate pool against that profile and distance.
- Order result lists for display (distance, price, rating).
"""
