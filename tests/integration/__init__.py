"""
API test package for the Task API.

Tests use the Flask test client and cover:
- CRUD operation testing
- Input validation testing
- Store outage and error handling testing
"""
