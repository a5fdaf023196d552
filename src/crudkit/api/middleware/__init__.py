"""API middleware package.

Manifesto:
    Cross-cutting concerns (request ids, error mapping) belong in
    middleware so the generated CRUD routes stay thin.

Tags:
    crudkit, api, middleware, cross-cutting
"""
