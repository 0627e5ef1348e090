"""API clients for external services."""

from .llm import LLMClient, UnsupportedProviderError
from .task_store import PersistenceError, TaskStoreClient

__all__ = ["LLMClient", "PersistenceError", "TaskStoreClient", "UnsupportedProviderError"]
