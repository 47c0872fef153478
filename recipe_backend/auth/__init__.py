"""
Session authentication.

Responsibilities:
- Keep user accounts with bcrypt-hashed passwords.
- Resolve the logged-in user from the session cookie for protected routes.
"""
