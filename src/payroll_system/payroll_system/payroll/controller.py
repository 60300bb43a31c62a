from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, PersistenceConflictError, RecordNotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Login required"}), 401
            if session.get("role") != Role.ADMIN.value:
                return jsonify({"success": False, "message": "Admin access required"}), 403
            return view(*args, **kwargs)

        return wrapper

    def _fail(e: Exception):
        if isinstance(e, AuthorizationError):
            status = 403
        elif isinstance(e, RecordNotFoundError):
            status = 404
        elif isinstance(e, PersistenceConflictError):
            status = 409
        else:
            status = 400
        return jsonify({"success": False, "message": str(e)}), status

    def _role() -> Role:
        return Role(session.get("role"))

    @app.route("/api/payroll/compute", methods=["POST"], endpoint="payroll_compute")
    @admin_required
    def payroll_compute():
        body = request.get_json(silent=True) or {}
        employee_id = body.get("employee_id")
        try:
            if employee_id not in (None, ""):
                try:
                    employee_id = int(employee_id)
                except (TypeError, ValueError) as err:
                    raise ValidationError("employee_id must be an integer") from err
            data = container.payroll_service.compute(
                current_role=_role(),
                month=body.get("month"),
                employee_id=employee_id or None,
            )
        except (ValidationError, AuthorizationError) as e:
            return _fail(e)
        except Exception:
            logger.exception("Payroll computation failed")
            return jsonify({"success": False, "message": "Payroll computation failed"}), 500
        return jsonify({"success": True, **data}), 200

    @app.route("/api/payroll/<int:record_id>/lock", methods=["POST"], endpoint="payroll_lock")
    @admin_required
    def payroll_lock(record_id: int):
        try:
            record = container.payroll_workflow_service.lock(current_role=_role(), record_id=record_id)
        except (ValidationError, AuthorizationError, RecordNotFoundError) as e:
            return _fail(e)
        return jsonify({"success": True, "record": record.to_dict()}), 200

    @app.route("/api/payroll/<int:record_id>/unlock", methods=["POST"], endpoint="payroll_unlock")
    @admin_required
    def payroll_unlock(record_id: int):
        try:
            record = container.payroll_workflow_service.unlock(current_role=_role(), record_id=record_id)
        except (ValidationError, AuthorizationError, RecordNotFoundError) as e:
            return _fail(e)
        return jsonify({"success": True, "record": record.to_dict()}), 200

    @app.route("/api/payroll/<int:record_id>/approve", methods=["POST"], endpoint="payroll_approve")
    @admin_required
    def payroll_approve(record_id: int):
        try:
            record = container.payroll_workflow_service.approve(
                current_role=_role(),
                record_id=record_id,
                approved_by=int(session["user_id"]),
            )
        except (ValidationError, AuthorizationError, RecordNotFoundError) as e:
            return _fail(e)
        return jsonify({"success": True, "record": record.to_dict()}), 200

    @app.route("/api/payroll/<int:record_id>/pay", methods=["POST"], endpoint="payroll_pay")
    @admin_required
    def payroll_pay(record_id: int):
        body = request.get_json(silent=True) or {}
        try:
            record = container.payroll_workflow_service.mark_paid(
                current_role=_role(),
                record_id=record_id,
                payment_date=body.get("payment_date"),
            )
        except (ValidationError, AuthorizationError, RecordNotFoundError, PersistenceConflictError) as e:
            return _fail(e)
        return jsonify({"success": True, "record": record.to_dict()}), 200
