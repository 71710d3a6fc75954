"""
Request and response schemas.

base.py holds the response envelope shared by every endpoint; the other
modules mirror the resource endpoints under api/v1/endpoints.
"""
