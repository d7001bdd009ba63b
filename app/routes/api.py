"""
REST API endpoints for Task management.

This module exposes CRUD operations for tasks via HTTP methods.
All endpoints return JSON responses and follow REST conventions.
Handlers only translate between HTTP and the task store; store errors
propagate to the application's error handlers, which map them to
status codes.

Endpoints:
    GET    /health        - Health check (reports store reachability)
    GET    /tasks          - List all tasks
    GET    /tasks/<id>     - Get a single task by ID
    POST   /tasks          - Create a new task
    PUT    /tasks/<id>     - Update an existing task (partial)
    DELETE /tasks/<id>     - Delete a task
"""

import logging
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from app.errors import ValidationError
from app.schemas import parse_create, parse_update
from app.store import STORE_EXTENSION, TaskStore

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def get_store() -> TaskStore:
    """Return the task store injected into the current application."""
    return current_app.extensions[STORE_EXTENSION]


def get_json_body() -> dict[str, Any]:
    """
    Read the request body as a JSON object.

    Raises:
        ValidationError: If the body is missing, malformed, or not an object.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# -----------------------------------------------------------------------------
# API Endpoints
# -----------------------------------------------------------------------------

@api_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Health check endpoint for deployment verification."""
    database_ok = get_store().ping()
    return jsonify({
        "status": "healthy" if database_ok else "degraded",
        "service": "tasks",
        "database": "ok" if database_ok else "unavailable",
    }), 200 if database_ok else 503


@api_bp.route("/tasks", methods=["GET"])
def get_tasks() -> tuple[Response, int]:
    """
    List all tasks in insertion order.

    Returns:
        JSON array of tasks and 200 status code.
    """
    logger.info("GET /tasks - Fetching all tasks")

    tasks = get_store().list()
    logger.info("Found %d tasks", len(tasks))

    return jsonify([task.to_dict() for task in tasks]), 200


@api_bp.route("/tasks/<task_id>", methods=["GET"])
def get_task(task_id: str) -> tuple[Response, int]:
    """
    Get a single task by ID.

    Args:
        task_id: The unique identifier of the task.

    Returns:
        JSON response with task data and 200 status code.
        Unknown or malformed ids surface as 404 via the error handlers.
    """
    logger.info("GET /tasks/%s - Fetching task", task_id)

    task = get_store().get(task_id)
    return jsonify(task.to_dict()), 200


@api_bp.route("/tasks", methods=["POST"])
def create_task() -> tuple[Response, int]:
    """
    Create a new task.

    Request Body (JSON):
        title: Task title (required, non-empty)
        description: Task description (optional)
        status: Task status (optional, default: pending)

    Returns:
        JSON response with created task and 201 status code,
        or error message and 400 if validation fails.
    """
    logger.info("POST /tasks - Creating new task")

    fields = parse_create(get_json_body())
    task = get_store().create(fields)

    logger.info("Created task with ID: %s", task.id)
    return jsonify(task.to_dict()), 201


@api_bp.route("/tasks/<task_id>", methods=["PUT"])
def update_task(task_id: str) -> tuple[Response, int]:
    """
    Update an existing task.

    Only the fields present in the JSON body are modified; everything
    else is left as it was.

    Args:
        task_id: The unique identifier of the task.

    Request Body (JSON):
        title: Task title
        description: Task description (null clears it)
        status: Task status

    Returns:
        JSON response with updated task and 200 status code,
        or error message and 404/400 if not found or validation fails.
    """
    logger.info("PUT /tasks/%s - Updating task", task_id)

    fields = parse_update(get_json_body())
    task = get_store().update(task_id, fields)

    logger.info("Updated task %s", task_id)
    return jsonify(task.to_dict()), 200


@api_bp.route("/tasks/<task_id>", methods=["DELETE"])
def delete_task(task_id: str) -> tuple[Response, int]:
    """
    Delete a task.

    Args:
        task_id: The unique identifier of the task.

    Returns:
        JSON response with the deleted task and 200 status code,
        or error message and 404 if not found.
    """
    logger.info("DELETE /tasks/%s - Deleting task", task_id)

    task = get_store().delete(task_id)

    logger.info("Deleted task %s", task_id)
    return jsonify(task.to_dict()), 200
