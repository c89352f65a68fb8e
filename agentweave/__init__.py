"""Agent and topic identifiers, subscriptions, persistent agent state, and JSON and JSON Schema helpers."""

__version__ = "0.1.0"

__all__ = ["ids", "subscription", "state", "json_utils", "schema_utils"]