"""Authentication and authorization.

Users log in with email/password and receive a signed JWT. Protected
routes depend on get_current_user, which turns the bearer token back into
a CurrentIdentity used to scope every query to the caller's own rows.
"""
