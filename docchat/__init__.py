"""DocChat: chat with uploaded PDF documents through semantic retrieval."""

__version__ = "0.1.0"
