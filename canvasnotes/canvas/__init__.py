"""
Canvas Interaction Module.

Client-side model of the note canvas. Holds the local note list, runs the
drag-and-drop state machine and turns pointer coordinates into note
positions. Talks to the backend only through the note procedures.

Architecture:
- geometry: pure pointer-to-position arithmetic
- client: httpx RPC client for the note procedures
- board: local note list, drag state and user intents
- Sends X-Frontend-ID: canvas header for log routing
"""
