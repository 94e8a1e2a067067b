from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("", views.notification_list, name="notification-list"),
    path("<uuid:notification_id>/read/", views.notification_mark_read, name="notification-read"),
    path("<uuid:notification_id>/", views.notification_delete, name="notification-delete"),
]
