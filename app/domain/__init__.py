"""Domain layer for the rental listings app.

This package holds the mutation result contract: form error trees, the
client-safe action state and the enums they share. It does not touch the
request, the session or the database; the only web dependency is Werkzeug's
``MultiDict``, read when echoing submitted form data.
"""
