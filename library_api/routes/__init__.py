"""
HTTP routers for the Library API.
"""
