"""
Data access layer.

Notes are only reachable through TenantNoteRepository, which is bound to a
single tenant id at construction. Tenants and users have small unscoped
lookup repositories used by login and upgrade.
"""
