"""
Pydantic schemas for form validation and API responses.
"""
