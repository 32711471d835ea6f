from __future__ import annotations

from fastapi import APIRouter

from chiya.application.dto.responses import PlaceholderResponse

# Domain areas reserved in the URL space; the floor itself runs in-process.
PLACEHOLDER_AREAS = (
    ("users", "User"),
    ("restaurants", "Restaurant"),
    ("tables", "Table"),
    ("menu", "Menu"),
    ("orders", "Order"),
    ("inventory", "Inventory"),
    ("staff", "Staff"),
    ("expenses", "Expense"),
    ("reports", "Report"),
)


def _placeholder_router(path: str, label: str) -> APIRouter:
    router = APIRouter(prefix=f"/api/v1/{path}", tags=[path])

    @router.get("/", response_model=PlaceholderResponse)
    def placeholder() -> PlaceholderResponse:
        return PlaceholderResponse(message=f"{label} routes endpoint")

    return router


routers = [_placeholder_router(path, label) for path, label in PLACEHOLDER_AREAS]
