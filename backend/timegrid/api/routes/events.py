from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from timegrid.services.table_events import ALL_TABLES, TableEventHub

router = APIRouter()


@router.websocket("/tables/ws")
async def tables_websocket(websocket: WebSocket) -> None:
    hub: TableEventHub = websocket.app.state.event_hub
    store = websocket.app.state.store
    table_id = websocket.query_params.get("table_id") or ALL_TABLES

    if table_id != ALL_TABLES and not store.has_table(table_id):
        await websocket.close(code=1008)
        return

    await hub.connect(table_id, websocket)
    try:
        await websocket.send_json({"event": "connected", "table_id": table_id, "version": store.version})
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(table_id, websocket)
