# Middleware package init
"""
Tenant Notes Backend — Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: one access line per request with status and duration
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

Authentication is NOT middleware here: it is a route dependency
(tenant_notes.auth.dependencies) so /health and /login stay open and the
gates remain plain functions.
"""
