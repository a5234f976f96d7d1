"""
Recipe suggestions.

Responsibilities:
- Search the recipe API by cuisine or dish term.
- Suggest recipes inspired by the restaurants a user approved.
- Fall back to built-in sample recipes when the API is unavailable.
"""
