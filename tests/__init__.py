"""
Test suite for the Task API.

This package contains:
- unit/: Model, schema and store tests against an in-process collection
- integration/: HTTP-level tests through the Flask test client
"""
