"""Sub-routers HTTP por bounded context."""
