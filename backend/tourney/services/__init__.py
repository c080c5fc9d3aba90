"""
Services Layer

Tournament logic with no HTTP concerns:
- Generators turn entrant ids into fresh, unsaved matches
- The advancement service keeps bracket slots consistent after a score change
- The store is the only place that touches the session
"""
