"""
Serializers for accounts.

Related files:
    - models.py: User model
    - views.py: Views that use these serializers
"""

from rest_framework import serializers

from accounts.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Public view of a user, as shown to other chat participants.

    Used for the caller's own record, search results, conversation
    participants and typing indicators.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "display_name",
            "email",
            "avatar_url",
            "is_online",
            "last_seen_at",
        ]
        read_only_fields = fields


class OnlineStatusSerializer(serializers.Serializer):
    """Request body for the presence endpoint."""

    is_online = serializers.BooleanField()


class UserSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
