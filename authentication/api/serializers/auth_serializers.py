from rest_framework import serializers

from authentication.domain.models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    assigned_store_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = CustomUser
        fields = (
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "role",
            "employee_role",
            "assigned_store_id",
        )
        read_only_fields = fields
