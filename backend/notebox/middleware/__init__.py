"""
Notebox Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request, plus the auth guard
       dependency.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → [Session] → Route Handler

    1. Request ID first so every later log line can be correlated
    2. Logging sees the final status, including session-store failures
    3. Session innermost: handlers and the auth guard read
       request.state.session, and cookie updates land on the real response

The auth guard (auth.require_auth) is a FastAPI dependency rather than a
middleware so it can be attached per router.
"""
