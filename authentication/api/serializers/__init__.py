from authentication.api.serializers.auth_serializers import UserSerializer
from authentication.api.serializers.jwt_serializers import RoleTokenObtainPairSerializer


__all__ = ["RoleTokenObtainPairSerializer", "UserSerializer"]
