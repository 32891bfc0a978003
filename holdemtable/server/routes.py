"""
HTTP API Routes for holdemtable.

Tables live in the TableManager stored on app.state; every route resolves
its table through get_manager().
"""

import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Request

from holdemtable.core.rules import TableConfig
from holdemtable.server.schemas import (
    CreateTableRequest, ActionRequest, ActionResultSchema, TableStateSchema, ErrorSchema,
)
from holdemtable.server.session import TableManager, TableSession


logger = logging.getLogger(__name__)

router = APIRouter()


def get_manager(request: Request) -> TableManager:
    return request.app.state.tables


def get_session(table_id: str, manager: TableManager = Depends(get_manager)) -> TableSession:
    session = manager.get(table_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Table {table_id} not found")
    return session


@router.get("/health")
async def health(manager: TableManager = Depends(get_manager)) -> Dict[str, Any]:
    return {"status": "ok", "tables": len(manager.tables)}


@router.post("/tables", response_model=TableStateSchema, status_code=201)
async def create_table(
    req: CreateTableRequest,
    manager: TableManager = Depends(get_manager),
) -> Dict[str, Any]:
    """
    Open a table for a user and deal the first hand.

    The human stack is loaded from the chip bank; the table falls back to
    local mode when the bank is unavailable.
    """
    try:
        config = TableConfig(
            small_blind=req.small_blind,
            big_blind=req.big_blind,
            ai_count=req.ai_count,
        )
        session = await manager.create_table(req.user_id, config, seed=req.seed)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return session.snapshot()


@router.get("/tables/{table_id}", response_model=TableStateSchema)
async def get_table(session: TableSession = Depends(get_session)) -> Dict[str, Any]:
    """Current snapshot of the table."""
    return session.snapshot()


@router.post(
    "/tables/{table_id}/actions",
    response_model=ActionResultSchema,
    responses={409: {"model": ErrorSchema}},
)
async def take_action(
    req: ActionRequest,
    session: TableSession = Depends(get_session),
) -> Dict[str, Any]:
    """
    Take an action for the human seat.

    Out-of-turn and illegal actions are rejected with 409 and leave the
    table unchanged.
    """
    result = await session.submit_action(req.action, req.amount)
    if not result.success:
        logger.warning(f"[{session.table_id}] rejected {req.action} {req.amount}: {result.message}")
        raise HTTPException(status_code=409, detail=result.message)

    return {
        "success": True,
        "message": result.message,
        "action": result.action_type.value if result.action_type else None,
        "amount": result.amount,
        "state": session.snapshot(),
    }


@router.delete("/tables/{table_id}")
async def close_table(table_id: str, manager: TableManager = Depends(get_manager)) -> Dict[str, Any]:
    """Close a table and cancel its timers."""
    if not await manager.close_table(table_id):
        raise HTTPException(status_code=404, detail=f"Table {table_id} not found")
    return {"success": True, "table_id": table_id}
