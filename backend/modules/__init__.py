"""
Feature modules for the Pocketbook session layer.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- service.py: Business logic implementation
- exceptions.py: Module-specific exceptions

Modules are layered: vault <- profile <- session, with preferences and
accounts consumed by session. They communicate through interfaces, not
concrete implementations.
"""
