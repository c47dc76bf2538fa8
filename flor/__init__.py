# 📄 File: flor/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'flor' folder as the Flor houseplant app backend and records its version.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the Flor FastAPI service.
#
# 🔄 Connected Modules / Calls From:
# - flor.main (startup event, OpenAPI metadata)

"""
Flor - Houseplant Watering Tracker API

Tracks plants, rooms and watering history, tells users which plants need
water, and offers AI-assisted plant identification and care sheets within
monthly usage limits.
"""

__version__ = "1.0.0"
__title__ = "Flor Plant Care API"
