"""Voice chat backend: LLM text replies rendered to speech."""

__version__ = "1.0.0"
