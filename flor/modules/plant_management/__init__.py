# 📄 File: flor/modules/plant_management/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything about a user's plants: adding and editing them, organising them into rooms,
# logging waterings and working out which ones are thirsty.
# 🧪 Purpose (Technical Summary):
# Plant management module (domain, infrastructure, presentation) for plant/room CRUD,
# insert-only watering history and derived watering status.

"""
Plant Management Module

Architecture follows Domain-Driven Design:
- Domain: Plant, Room and WateringHistory models, services and the watering calculator
- Infrastructure: SQLAlchemy models and repository implementations
- Presentation: /plants, /rooms, /water and /notifications endpoints
"""
