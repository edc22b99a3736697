from .openai import OpenAIResponseClient

__all__ = ["OpenAIResponseClient"]
