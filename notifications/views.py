import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger(__name__)

NOT_FOUND = {"error": "notification_not_found", "detail": "Notification not found"}


def _own_notification(request, notification_id):
    """The caller's notification, or None. Other users' rows are reported as missing."""
    return Notification.objects.filter(pk=notification_id, recipient=request.user).first()


@extend_schema(
    operation_id="notifications_list",
    summary="List the caller's notifications",
    parameters=[OpenApiParameter(name="unread", type=str, description="1 to return unread notifications only")],
    responses={200: NotificationSerializer(many=True)},
    tags=["Notifications"],
)
@api_view(["GET"])
@permission_classes([IsAuthenticated])
def notification_list(request):
    notifications = Notification.objects.filter(recipient=request.user)
    if request.query_params.get("unread") in ("1", "true", "True"):
        notifications = notifications.filter(is_read=False)

    data = NotificationSerializer(notifications.order_by("-created_at")[:100], many=True).data
    return Response(
        {"results": data, "unread_count": Notification.objects.filter(recipient=request.user, is_read=False).count()}
    )


@extend_schema(
    operation_id="notifications_mark_read",
    summary="Mark a notification as read",
    request=None,
    responses={200: NotificationSerializer},
    tags=["Notifications"],
)
@api_view(["PATCH", "POST"])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, notification_id):
    notification = _own_notification(request, notification_id)
    if notification is None:
        return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read"])
    return Response(NotificationSerializer(notification).data)


@extend_schema(
    operation_id="notifications_delete",
    summary="Delete a notification",
    request=None,
    responses={204: None},
    tags=["Notifications"],
)
@api_view(["DELETE"])
@permission_classes([IsAuthenticated])
def notification_delete(request, notification_id):
    notification = _own_notification(request, notification_id)
    if notification is None:
        return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

    notification.delete()
    logger.info(f"User {request.user.pk} deleted notification {notification_id}")
    return Response(status=status.HTTP_204_NO_CONTENT)
