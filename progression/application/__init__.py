"""
Application layer.

Orchestrates the domain for the operations the engine exposes. Every request
is a typed message (a Command or a Query) routed by the MessageBus to the
use case that owns its component.

This layer contains:
- Messages: one closed union per component
- Use cases: handle the messages of one component
- Protocols: repository and policy ports implemented by infrastructure
- Result / EngineError: the outcome returned by the bus
"""
