"""
media — storage of uploaded profile pictures.
"""
