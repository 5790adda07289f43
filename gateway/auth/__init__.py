"""
Authentication gateway core.

Design goals:
- Validate credentials before the identity provider is ever called.
- Provider-agnostic orchestration (Firebase today; anything implementing IdentityProvider).
- Cookie-based session carrying only the user id (HttpOnly).
- Provider failures translated into field-attributed errors the UI can render inline.
"""
