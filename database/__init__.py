"""
database — ORM models, sessions and the credential store.
"""
