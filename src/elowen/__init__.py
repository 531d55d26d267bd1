"""
Elowen - Personal skincare coach.

Components:
- Onboarding: Assessment wizard that feeds routine generation
- Core: Profile store, routine and analysis data model
- Export: Calendar (.ics) export of the daily routine
"""

__version__ = "1.0.0"
