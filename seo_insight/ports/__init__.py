from .llm import ModelInvoker

__all__ = ["ModelInvoker"]
