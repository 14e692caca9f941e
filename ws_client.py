#!/usr/bin/env python3
"""
Simple WebSocket client for the reminder list screen
Run with: python ws_client.py [ws://host:port/ws/reminders]
"""

import asyncio
import json
import sys

import websockets


async def watch_reminder_list(uri: str):
    try:
        print(f"🔗 Connecting to {uri}...")
        async with websockets.connect(uri) as websocket:
            print("✅ Connected successfully!")

            # Print whatever the screen renders for a few seconds
            try:
                while True:
                    message = await asyncio.wait_for(websocket.recv(), timeout=5)
                    data = json.loads(message)
                    print(f"📥 {data.get('type')}: {data}")
            except asyncio.TimeoutError:
                pass

            # Open and dismiss the delete-all dialog
            for intent in ({"type": "request_delete_all"}, {"type": "delete_cancelled"}):
                print(f"📤 Sending: {intent}")
                await websocket.send(json.dumps(intent))
            response = await websocket.recv()
            print(f"📥 Received: {response}")

            print("✅ WebSocket session completed successfully!")

    except websockets.exceptions.ConnectionClosed as e:
        print(f"❌ Connection closed: {e}")
    except websockets.exceptions.InvalidURI as e:
        print(f"❌ Invalid URI: {e}")
    except websockets.exceptions.WebSocketException as e:
        print(f"❌ WebSocket error: {e}")
    except Exception as e:
        print(f"❌ Unexpected error: {e}")


if __name__ == "__main__":
    uri = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:8000/ws/reminders"
    print("🧪 Watching the reminder list screen...")
    asyncio.run(watch_reminder_list(uri))
