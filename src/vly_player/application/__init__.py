"""
Application Layer

Contains use cases, command handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Shortcut commands and their handler
- services/: Session, playlist, shortcut, history and orchestration services
- interfaces/: Port interfaces for infrastructure adapters
"""
