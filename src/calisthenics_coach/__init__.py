"""Calisthenics coaching backend: relays Ollama generations to mobile clients."""
