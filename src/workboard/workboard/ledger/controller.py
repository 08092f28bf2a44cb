from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import json_body, login_required, not_found, result_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_engine
    auth = login_required(container.auth_gate)

    # --- work records ---

    @app.route("/api/works", methods=["GET"], endpoint="list_works")
    @auth
    async def list_works():
        worker_id = request.args.get("workerId")
        records = await (ledger.get_work_records_by_worker(worker_id) if worker_id else ledger.get_all_work_records())
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/works", methods=["POST"], endpoint="add_work")
    @auth
    async def add_work():
        body = json_body()
        result = await ledger.add_work_record(
            body.get("workerId"), body.get("date"), body.get("workType"), body.get("earnedAmount")
        )
        return result_response(result, success_status=201)

    @app.route("/api/works/<record_id>", methods=["GET"], endpoint="get_work")
    @auth
    async def get_work(record_id: str):
        record = await ledger.get_work_record(record_id)
        return jsonify(record.to_dict()) if record else not_found("Work record not found")

    @app.route("/api/works/<record_id>", methods=["PUT", "PATCH"], endpoint="update_work")
    @auth
    async def update_work(record_id: str):
        body = json_body()
        result = await ledger.update_work_record(
            record_id,
            date=body.get("date"),
            work_type=body.get("workType"),
            earned_amount=body.get("earnedAmount"),
        )
        return result_response(result)

    @app.route("/api/works/<record_id>", methods=["DELETE"], endpoint="delete_work")
    @auth
    async def delete_work(record_id: str):
        return result_response(await ledger.delete_work_record(record_id))

    # --- payment records ---

    @app.route("/api/payments", methods=["GET"], endpoint="list_payments")
    @auth
    async def list_payments():
        worker_id = request.args.get("workerId")
        records = await (ledger.get_payments_by_worker(worker_id) if worker_id else ledger.get_all_payments())
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/payments", methods=["POST"], endpoint="add_payment")
    @auth
    async def add_payment():
        body = json_body()
        result = await ledger.add_payment_record(
            body.get("workerId"),
            body.get("date"),
            body.get("amount"),
            body.get("paymentType"),
            body.get("note"),
        )
        return result_response(result, success_status=201)

    @app.route("/api/payments/<record_id>", methods=["GET"], endpoint="get_payment")
    @auth
    async def get_payment(record_id: str):
        record = await ledger.get_payment_record(record_id)
        return jsonify(record.to_dict()) if record else not_found("Payment record not found")

    @app.route("/api/payments/<record_id>", methods=["PUT", "PATCH"], endpoint="update_payment")
    @auth
    async def update_payment(record_id: str):
        body = json_body()
        result = await ledger.update_payment_record(
            record_id,
            date=body.get("date"),
            amount=body.get("amount"),
            payment_type=body.get("paymentType"),
            note=body.get("note"),
        )
        return result_response(result)

    @app.route("/api/payments/<record_id>", methods=["DELETE"], endpoint="delete_payment")
    @auth
    async def delete_payment(record_id: str):
        return result_response(await ledger.delete_payment_record(record_id))
