"""
Shared, cross-cutting code for the API.

`core/` holds the pieces every resource uses: settings, the database handle,
startup bootstrap, CORS and error handlers. Resource-specific SQL and routes
live in their own package (e.g. `users/`).
"""
