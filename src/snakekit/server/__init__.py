"""HTTP and WebSocket front end for live previews."""
