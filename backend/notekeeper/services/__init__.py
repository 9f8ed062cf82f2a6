# Services package init
"""
NoteKeeper Backend: Services Layer
==================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - NoteService:  Ownership-scoped note CRUD
    - UserService:  Account registration
    - TokenService: Password hashing, credential checks, JWT issue/decode

Write methods commit their own transaction before reporting success.
Services never raise for "not yours"; they answer None or
False exactly as they would for a record that does not exist.
"""
