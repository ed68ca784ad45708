"""Interactive launcher runtime: terminal modes, overlay geometry and the event loop."""
