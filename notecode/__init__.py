"""
NoteCode.

- backend/: API, entity store, database, configuration
"""
