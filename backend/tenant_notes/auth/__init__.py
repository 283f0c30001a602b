"""
Authentication and authorization.

    passwords     bcrypt hash/verify
    tokens        TokenCodec: issue and verify signed bearer tokens
    gates         transport-independent auth gate and role gate
    dependencies  FastAPI wiring for the gates
"""
