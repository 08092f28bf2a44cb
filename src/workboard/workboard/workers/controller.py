from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, login_required, not_found, result_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    registry = container.worker_registry
    auth = login_required(container.auth_gate)

    @app.route("/api/workers", methods=["GET"], endpoint="list_workers")
    @auth
    async def list_workers():
        workers = await registry.list_workers()
        return jsonify([w.to_dict() for w in workers])

    @app.route("/api/workers", methods=["POST"], endpoint="add_worker")
    @auth
    async def add_worker():
        body = json_body()
        result = await registry.add_worker(body.get("id"), body.get("name"), body.get("jobRole"))
        return result_response(result, success_status=201)

    @app.route("/api/workers/<worker_id>", methods=["GET"], endpoint="get_worker")
    @auth
    async def get_worker(worker_id: str):
        worker = await registry.get_worker(worker_id)
        if not worker:
            return not_found("Worker not found")
        summary = await container.ledger_engine.worker_summary(worker_id)
        return jsonify({**worker.to_dict(), **summary.to_dict()})

    @app.route("/api/workers/<worker_id>", methods=["PUT", "PATCH"], endpoint="update_worker")
    @auth
    async def update_worker(worker_id: str):
        body = json_body()
        result = await registry.update_worker(
            worker_id,
            new_id=body.get("id"),
            name=body.get("name"),
            job_role=body.get("jobRole"),
        )
        return result_response(result)

    @app.route("/api/workers/<worker_id>", methods=["DELETE"], endpoint="delete_worker")
    @auth
    async def delete_worker(worker_id: str):
        return result_response(await registry.delete_worker(worker_id))

    @app.route("/api/workers/<worker_id>/ledger", methods=["GET"], endpoint="worker_ledger")
    @auth
    async def worker_ledger(worker_id: str):
        ledger = await container.report_service.build_worker_report(worker_id)
        if not ledger:
            return not_found("Worker not found")
        return jsonify(ledger.to_dict())
