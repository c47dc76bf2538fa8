"""
AI Assistant Module

PlantNet identification, OpenAI care generation, AI plant creation,
feedback and the wizard state machine.
"""
