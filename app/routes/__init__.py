"""
Routes package for the Task API.

This package contains route blueprints:
- api: REST API endpoints for task CRUD and health checks
"""
