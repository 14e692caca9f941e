from fastapi import WebSocket
from typing import Dict
import json
import logging
from datetime import datetime

logger = logging.getLogger(__name__)


class WebSocketManager:
    def __init__(self):
        # Store active connections by session id
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, session_id: str):
        """Register an accepted WebSocket under its session id"""
        # Note: websocket.accept() is called in the endpoint, not here
        self.active_connections[session_id] = websocket
        logger.info(f"Session {session_id} connected. Total connections: {self.get_total_connections()}")

        # Send welcome message
        await self.send_personal_message(
            {
                "type": "connection",
                "message": "Connected to reminder service",
                "session_id": session_id,
                "timestamp": datetime.now().isoformat()
            },
            websocket
        )

    def disconnect(self, session_id: str):
        """Forget a session's WebSocket"""
        if self.active_connections.pop(session_id, None) is not None:
            logger.info(f"Session {session_id} disconnected. Remaining connections: {self.get_total_connections()}")

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send a message to a specific WebSocket connection"""
        await websocket.send_text(json.dumps(message))

    async def broadcast_to_all(self, message: dict):
        """Broadcast a message to every connected session"""
        message_data = {
            **message,
            "timestamp": datetime.now().isoformat()
        }

        disconnected_sessions = []

        for session_id, websocket in list(self.active_connections.items()):
            try:
                await self.send_personal_message(message_data, websocket)
            except Exception as e:
                logger.error(f"Error broadcasting to session {session_id}: {e}")
                disconnected_sessions.append(session_id)

        # Clean up disconnected websockets
        for session_id in disconnected_sessions:
            self.disconnect(session_id)

    def get_total_connections(self) -> int:
        """Get total number of active connections"""
        return len(self.active_connections)


# Global instance
websocket_manager = WebSocketManager()
