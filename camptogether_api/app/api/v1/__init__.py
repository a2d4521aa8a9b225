"""
Version 1 of the API.

Routes are served under ``/api``; the health check is mounted at the
root.
"""
