"""HTTP and WebSocket interface for stack chess games."""
