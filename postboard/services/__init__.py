# Services package init
"""
Postboard Backend - Services Layer
===================================

What:  Business rules between routes (HTTP) and repositories (queries).
How:   Services take the request's AsyncSession (and, where needed, the
       caller's Session) as arguments, apply validation and orchestration,
       and raise exceptions from postboard.exceptions.

Service Inventory:
    - AuthService:    register, login, logout
    - ProfileService: profile lookup and edit
    - PostService:    discover, search, single post, user feed, likes
    - CommentService: comment submission
"""
