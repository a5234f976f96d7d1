"""
Session state: the candidate pool, decision history and duel for one user.
"""
