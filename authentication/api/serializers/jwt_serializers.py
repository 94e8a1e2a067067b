from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT pair whose claims carry the caller's role and store assignment"""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        token["role"] = user.role
        token["is_admin"] = user.is_admin()
        token["assigned_store_id"] = str(user.assigned_store_id) if user.assigned_store_id else None

        return token
