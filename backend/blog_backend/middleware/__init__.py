# Middleware package init
"""
Blog Backend — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Responses pass back through the chain in reverse, so the request id
    header is set on every response and the access log sees the final
    status code and duration.
"""
