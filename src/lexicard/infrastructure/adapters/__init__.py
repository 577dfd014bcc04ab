from .memory import InMemoryCardRepository, InMemorySessionRepository
from .yaml_store import YamlCardRepository

__all__ = ["InMemoryCardRepository", "InMemorySessionRepository", "YamlCardRepository"]
