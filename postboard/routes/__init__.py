# Routes package init
"""
Postboard Backend - Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - health.py:   GET  /welcome, GET /health
    - auth.py:     GET/POST /register, GET/POST /login, GET /logout
    - profile.py:  GET /profile, GET/POST /editprofile, GET /user/{username}
    - posts.py:    GET /, GET /discover, GET /search, GET /upload,
                   GET /post/{postid}, POST /post/{postid}/comment,
                   POST /post/{postid}/like

Design Principle:
    Routes handle HTTP concerns only: read the form/path/session, call a
    service, pick a view or a JSON body. Page routes render domain errors
    as a message on a view; JSON routes let them reach the global handlers.
"""
