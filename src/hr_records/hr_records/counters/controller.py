from __future__ import annotations

from flask import Flask

from ..auth.guard import require_admin
from ..common.web import login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ids = container.ids

    @app.route("/api/counters/<entity_type>", methods=["GET"], endpoint="get_counter")
    @login_required(container)
    def get_counter(ctx, entity_type: str):
        require_admin(ctx)
        counter = ids.get_counter(entity_type)
        return ok(
            {
                "entityType": counter.entity_type,
                "lastNumber": counter.last_number,
                "lastId": counter.last_id,
                "updatedAt": counter.updated_at,
                "nextId": ids.preview_next_id(entity_type),
            }
        )
