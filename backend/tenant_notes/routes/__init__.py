# Routes package init
"""
Tenant Notes Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:    POST   /login
    - notes.py:   POST   /notes
                  GET    /notes
                  GET    /notes/{note_id}
                  PUT    /notes/{note_id}
                  DELETE /notes/{note_id}
    - tenants.py: POST   /tenants/{slug}/upgrade   (ADMIN)
    - health.py:  GET    /health, GET /health/ready

Design Principle:
    Routes are THIN: pull the body/path, resolve identity through the auth
    dependencies, call a service, pick the status code.
"""
