from .gemini_invoker import GeminiModelInvoker

__all__ = ["GeminiModelInvoker"]
