from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import PyMongoError

from syncvision.errors import StoreError
from syncvision.models.task_model import Task
from syncvision.utils.db import get_db, serialize_doc


tasks_bp = Blueprint("tasks", __name__)


@tasks_bp.get("/tasks")
def list_tasks():
    current_app.logger.info("GET /tasks request received.")
    db = get_db()
    try:
        docs = [serialize_doc(d) for d in db.tasks.find()]
    except PyMongoError as exc:
        current_app.logger.exception("Error fetching tasks: %s", exc)
        raise StoreError("Error fetching tasks") from exc
    current_app.logger.info("Fetched %d tasks", len(docs))
    return jsonify(docs), 200


@tasks_bp.post("/tasks")
def create_task():
    payload = request.get_json(silent=True)
    current_app.logger.info("POST /tasks request received with body: %s", payload)
    # Raises ValidationError (400) before anything touches the store
    task = Task.from_payload(payload)

    db = get_db()
    doc = task.to_document()
    try:
        res = db.tasks.insert_one(doc)
        created = db.tasks.find_one({"_id": res.inserted_id})
        if created is None:
            # Read-back can miss on a lagging secondary; insert_one set doc["_id"]
            created = {"_id": res.inserted_id, **doc}
    except PyMongoError as exc:
        current_app.logger.exception("Error creating task: %s", exc)
        raise StoreError("Error creating task") from exc
    current_app.logger.info("Task created successfully: %s", res.inserted_id)
    return jsonify(serialize_doc(created)), 200
