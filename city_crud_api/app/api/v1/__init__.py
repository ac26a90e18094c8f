"""
Version 1 of the API.

The v1 routes are mounted without a version segment so that the paths
match the ``/cities`` contract the existing clients already use.
"""
