# Routes package init
"""
NoteKeeper Backend: API Routes Package
======================================

Route Inventory:
    - users.py:   POST   /api/users/register   (create an account)
                  POST   /api/token            (credentials → bearer token)
    - notes.py:   GET    /api/notes            (list caller's notes)
                  POST   /api/notes            (create)
                  GET    /api/notes/{id}       (detail)
                  PUT    /api/notes            (update, id in body)
                  DELETE /api/notes/{id}       (delete)
    - health.py:  GET    /health               (service health check)

Routes stay thin: they resolve the identity, call a service and map its
boolean/None result to a status code.
"""
