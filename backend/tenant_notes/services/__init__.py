# Services package init
"""
Tenant Notes Backend — Services Layer
=====================================

What:  Business logic sitting between routes (HTTP) and repositories (SQL).
Why:   Routes handle HTTP, services handle rules, repositories handle scoping.

Service Inventory:
    - AuthService:   login (credential check + token issue)
    - NoteService:   tenant-scoped note CRUD with plan admission
    - TenantService: FREE → PRO upgrade for the caller's own tenant
    - plans:         the pure plan admission check
"""
