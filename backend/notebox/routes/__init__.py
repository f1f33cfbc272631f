"""
Notebox Backend — API Routes Package
=====================================

What:  HTTP route handlers (path → controller binding).

Route Inventory:
    - notes.py:   /api/notes          (CRUD, session required)
    - users.py:   /api/users          (signup, login, logout, current user)
    - health.py:  GET /health         (service health check)

Design Principle:
    Routes stay thin: read the request, call a service, pick the status
    code. Validation and persistence live in services/.
"""
