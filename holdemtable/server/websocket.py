"""
WebSocket endpoint for real-time table updates.

Protocol:
1. Client connects to /ws/{table_id}
2. Server sends {"type": "state", ...} now and after every change,
   plus {"type": "notice", "message": ...} for bank failures
3. Client sends {"type": "action", "action": "CALL", "amount": 0}
   or {"type": "get_state"}
4. Rejected messages are answered with {"type": "error", "message": ...}
"""

from __future__ import annotations
from typing import Dict, Any
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from holdemtable.server.schemas import ActionRequest
from holdemtable.server.session import TableSession


logger = logging.getLogger(__name__)


async def websocket_endpoint(websocket: WebSocket, table_id: str):
    await websocket.accept()

    session = websocket.app.state.tables.get(table_id)
    if session is None:
        await websocket.send_json({"type": "error", "message": f"Table {table_id} not found"})
        await websocket.close()
        return

    session.add_listener(websocket.send_json)
    logger.info(f"Client connected to {table_id}")

    try:
        await websocket.send_json({"type": "state", **session.snapshot()})

        while True:
            message = await websocket.receive_json()
            response = await handle_message(session, message)
            if response is not None:
                await websocket.send_json(response)

    except WebSocketDisconnect:
        logger.info(f"Client disconnected from {table_id}")
    except Exception as e:
        logger.error(f"WebSocket error on {table_id}: {e}")
    finally:
        session.remove_listener(websocket.send_json)
        # A table nobody is watching is abandoned
        tables = websocket.app.state.tables
        if not session.listeners and tables.get(table_id) is session:
            logger.info(f"Last client left {table_id}, closing it")
            await tables.close_table(table_id)


async def handle_message(session: TableSession, message: Dict[str, Any]):
    """
    Handle a message from the client.

    Returns:
        Reply dict, or None when the state broadcast is the reply
    """
    msg_type = message.get("type", "")

    if msg_type == "get_state":
        return {"type": "state", **session.snapshot()}

    if msg_type != "action":
        return {"type": "error", "message": f"Unknown message type: {msg_type}"}

    try:
        req = ActionRequest(action=message.get("action"), amount=message.get("amount", 0))
    except ValidationError:
        return {"type": "error", "message": f"Invalid action: {message.get('action')}"}

    result = await session.submit_action(req.action, req.amount)
    if not result.success:
        return {"type": "error", "message": result.message}
    return None
