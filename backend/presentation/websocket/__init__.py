"""WebSocket: broadcast de snapshots y sesiones por cliente."""
