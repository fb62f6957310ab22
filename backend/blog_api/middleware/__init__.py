# Middleware package init
"""
Blog API Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [CORS] → [Request ID] → [Access Log] → [GZip] → Route Handler

    1. CORS: Preflight handling and headers on every response, 500s included
    2. Request ID: Correlation id in a ContextVar and the X-Request-ID header
    3. Access Log: One line per request; renders unexpected faults as 500
"""
