"""Core engine: subscription store, socket endpoints, wire protocol and refresh."""
