"""
Flor bounded contexts: plant management, usage limits and the AI assistant.
"""
