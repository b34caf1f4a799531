"""
Application Layer for the workout performance engine.

This package contains:
- exceptions.py: Error taxonomy shared by the engine, use cases and adapters
- ports/: Abstract repository interfaces (what the use cases need)
- use_cases/: Session start, session completion and analytics queries
"""
