from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from backend import room_registry
from connection import Connection
from constants import LOG_FILE, LOG_LEVEL
from dispatcher import EventDispatcher
from logging_config import get_logger, setup_logging
from routers.rooms import rooms_router

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)

app = FastAPI(title="Room Relay")

# Configure CORS to allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rooms_router)

dispatcher = EventDispatcher(room_registry)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"ok": True}


@app.websocket("/")
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Relay endpoint. Every frame is a JSON object with a `type` field."""
    await websocket.accept()
    connection = Connection(websocket)
    connection.start()
    dispatcher.on_connect(connection)

    frame_count = 0
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is None:
                continue

            frame_count += 1
            logger.debug(f"Received frame #{frame_count} from connection {connection.connection_id}")
            dispatcher.on_frame(connection, raw)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected normally for connection {connection.connection_id}")
    except Exception as e:
        logger.error(f"Error on connection {connection.connection_id}: {e}", exc_info=True)
    finally:
        # No awaits before cleanup, so it also runs when the task is cancelled
        dispatcher.on_disconnect(connection)
        connection.close()
