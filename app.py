from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from backend import signaling_backend
from constants import CORS_ORIGINS, LOG_FILE, LOG_LEVEL
from errors import MalformedMessageError, UnknownEventError
from logging_config import get_logger, setup_logging
from routers.api import api_router

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)

app = FastAPI(title="Video Talker Signaling")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(api_router)

logger.info("FastAPI application initialized")


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Signaling WebSocket.

    Every frame in either direction is a JSON object of the form
    {"event": "<name>", "data": {...}}. The first frame the server sends is
    "connection", carrying the id other clients use to address this one.
    """
    await websocket.accept()
    backend = signaling_backend
    connection_id = await backend.on_accept(websocket)

    try:
        message_count = 0
        while True:
            try:
                message = await websocket.receive()
            except WebSocketDisconnect:
                logger.info(f"WebSocket disconnected normally for connection {connection_id}")
                break
            if message["type"] == "websocket.disconnect":
                logger.info(f"WebSocket disconnected normally for connection {connection_id}")
                break
            message_count += 1
            logger.debug(f"Received message #{message_count} from connection {connection_id}")

            try:
                data = message.get("text")
                if data is None:
                    raise MalformedMessageError("Binary frames are not supported")
                await backend.handle_frame(connection_id, data)
            except (MalformedMessageError, UnknownEventError) as e:
                # Bad frames are dropped; the connection stays up.
                logger.warning(f"Dropping frame #{message_count} from connection {connection_id}: {e}")
    except Exception as e:
        logger.error(f"WebSocket error for connection {connection_id}: {e}", exc_info=True)
    finally:
        await backend.on_close(connection_id)
        logger.info(f"User disconnected: {connection_id}")
        try:
            await websocket.close()
        except Exception as e:
            logger.debug(f"Error closing WebSocket: {e}")
