from __future__ import annotations

from flask import Blueprint, Flask, g, jsonify, request

from ..common.http import json_body, json_errors, token_required
from ..container import Container

# JSON wire name -> service payload key
_TASK_FIELDS = {
    "date": "date",
    "project": "project",
    "typeOfWork": "type_of_work",
    "description": "description",
    "hours": "hours",
}


def _task_payload(data: dict) -> dict:
    return {key: data[wire] for wire, key in _TASK_FIELDS.items() if wire in data}


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("timesheets", __name__, url_prefix="/api/timesheet")
    login_required = token_required(container.access_guard)
    service = container.timesheet_service

    @bp.route("", methods=["POST"], endpoint="create_week")
    @json_errors
    @login_required
    def create_week():
        data = json_body()
        ts = service.create_week(
            user_id=g.current_user.user_id,
            week_start_date=data.get("weekStartDate"),
            week_end_date=data.get("weekEndDate"),
        )
        return jsonify({"message": "Weekly timesheet created successfully", "timesheet": ts.to_dict()}), 201

    @bp.route("", methods=["GET"], endpoint="list_weeks")
    @json_errors
    @login_required
    def list_weeks():
        result = service.list_weeks(
            user_id=g.current_user.user_id,
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        return jsonify(
            {
                "message": "Weekly timesheets retrieved successfully",
                "timesheets": [ts.to_dict() for ts in result.items],
                "pagination": result.pagination.to_dict(),
            }
        ), 200

    @bp.route("/<timesheet_id>", methods=["GET"], endpoint="get_week")
    @json_errors
    @login_required
    def get_week(timesheet_id: str):
        ts = service.get_week(user_id=g.current_user.user_id, timesheet_id=timesheet_id)
        return jsonify({"message": "Weekly timesheet retrieved successfully", "timesheet": ts.to_dict()}), 200

    @bp.route("/<timesheet_id>/task", methods=["POST"], endpoint="add_task")
    @json_errors
    @login_required
    def add_task(timesheet_id: str):
        change = service.add_task(
            user_id=g.current_user.user_id,
            timesheet_id=timesheet_id,
            payload=_task_payload(json_body()),
        )
        return jsonify(
            {
                "message": "Daily task added successfully",
                "task": change.task.to_dict(),
                "timesheet": change.timesheet.summary_dict(),
            }
        ), 201

    @bp.route("/<timesheet_id>/task/<task_id>", methods=["PUT"], endpoint="update_task")
    @json_errors
    @login_required
    def update_task(timesheet_id: str, task_id: str):
        change = service.update_task(
            user_id=g.current_user.user_id,
            timesheet_id=timesheet_id,
            task_id=task_id,
            payload=_task_payload(json_body()),
        )
        return jsonify(
            {
                "message": "Daily task updated successfully",
                "task": change.task.to_dict(),
                "timesheet": change.timesheet.summary_dict(),
            }
        ), 200

    @bp.route("/<timesheet_id>/task/<task_id>", methods=["DELETE"], endpoint="delete_task")
    @json_errors
    @login_required
    def delete_task(timesheet_id: str, task_id: str):
        change = service.delete_task(user_id=g.current_user.user_id, timesheet_id=timesheet_id, task_id=task_id)
        return jsonify({"message": "Daily task deleted successfully", "timesheet": change.timesheet.summary_dict()}), 200

    app.register_blueprint(bp)
