"""Authentication.

Learn: Users register with a username/password and log in for a JWT
access/refresh token pair. The access token's subject is the user id;
every protected REST route and the notification WebSocket resolve the
caller from it. Nothing downstream authenticates on its own.
"""
