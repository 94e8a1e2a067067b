from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.api.serializers import RoleTokenObtainPairSerializer
from authentication.api.views.auth_views import MeView

app_name = "authentication"

urlpatterns = [
    path("login/", TokenObtainPairView.as_view(serializer_class=RoleTokenObtainPairSerializer), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("me/", MeView.as_view(), name="me"),
]
