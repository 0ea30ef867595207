"""
Branchstock HTTP API (Django REST framework).

Usage in urls.py:
    path("api/", include("branchstock.api.urls")),
"""
