"""
Accounts app: durable user records for externally authenticated callers.

This app handles:
- The User model (one row per identity-provider subject)
- Mapping a validated bearer token to an ExternalIdentity
- Creating/patching the user profile on first sight or attribute drift
- The per-user online flag and last-seen timestamp

Related apps:
    - chat: conversations, messages, reactions and typing indicators

Usage:
    from accounts.services import IdentityService

    result = IdentityService.resolve_or_create(identity)
    if result.success:
        user = result.data
"""
