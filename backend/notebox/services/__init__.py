"""
Notebox Backend — Services Package
===================================

What:  Business logic, independent of HTTP.

Service Inventory:
    - note_service.py: notes CRUD (validation + one database operation)
    - user_service.py: signup, login, authenticated-user lookup
    - password.py:     bcrypt hashing and verification
"""
