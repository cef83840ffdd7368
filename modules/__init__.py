"""
Feature modules for the HeartBridge client.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer and local state
- service.py: Business logic implementation
- exceptions.py: Module-specific exceptions (where needed)

Modules communicate through interfaces, not concrete implementations.
"""
