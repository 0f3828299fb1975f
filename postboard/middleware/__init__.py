# Middleware package init
"""
Postboard Backend - Middleware Package
=======================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Session] → [GZip] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: one access line per request, with status and duration
    3. Session: resolves the session cookie into request.state.session and
       writes the cookie back after login/logout
"""
