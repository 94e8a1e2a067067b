from django.http import FileResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.ordering.api.serializers import (
    CreateOrderRequestSerializer,
    ErrorResponseSerializer,
    OrderListResponseSerializer,
    OrderSerializer,
    PickupConfirmResponseSerializer,
    UpdateOrderStatusRequestSerializer,
)
from marketplace.ordering.domain.services.order_service import CreateOrderCommand, OrderService
from marketplace.services import ErrorCodes

ERROR_STATUS = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.STORE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.SERVICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ATTACHMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PICKUP_TOKEN_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PICKUP_TOKEN_EXPIRED: status.HTTP_410_GONE,
    ErrorCodes.INVALID_ORDER_STATE: status.HTTP_409_CONFLICT,
    ErrorCodes.ATTACHMENT_UPLOAD_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCodes.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

LIST_PARAMETERS = [
    OpenApiParameter(name="status", type=str, description="Filter by order status"),
    OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
    OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20, max: 100)"),
]


def error_response(result) -> Response:
    """Map a failed ServiceResult to an HTTP error response."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result.to_dict(), status=http_status)


def validation_response(errors) -> Response:
    return Response({"error": ErrorCodes.VALIDATION_ERROR, "detail": errors}, status=status.HTTP_400_BAD_REQUEST)


def page_params(request):
    """(page, page_size) from the query string, or None if either is not an integer."""
    try:
        return int(request.query_params.get("page", 1)), int(request.query_params.get("page_size", 20))
    except (TypeError, ValueError):
        return None


def serialize_page(page: dict) -> dict:
    data = dict(page)
    data["results"] = OrderSerializer(page["results"], many=True).data
    return data


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OrderService:
        return container.order_service()

    @extend_schema(
        operation_id="orders_create",
        summary="Place an order",
        description="""
        **What it receives:**
        - `store_id`, `service_id` (UUID): Store and one of its active services
        - `quantity` (int >= 1), `notes` (string, optional)
        - `selected_options` (list or JSON string): `[{label, option_index}]`
        - `currency` (optional), down payment fields (optional)
        - Multipart `files[]` (design files) and `receipt` (down-payment receipt)

        **What it returns:**
        - Created order in `pending` / `unpaid` with server-computed prices
        - The store owner is notified
        """,
        request=CreateOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Role cannot place orders"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Store or service not found"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Attachment upload failed"),
        },
        tags=["Orders"],
    )
    def create(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        files = request.FILES.getlist("files[]") or request.FILES.getlist("files")
        command = CreateOrderCommand(
            files=files,
            receipt=request.FILES.get("receipt"),
            **serializer.validated_data,
        )

        result = self.get_service().create_order(request.user, command)
        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_mine",
        summary="List the caller's orders",
        parameters=LIST_PARAMETERS,
        responses={200: OrderListResponseSerializer, 400: ErrorResponseSerializer},
        tags=["Orders"],
    )
    def mine(self, request):
        params = page_params(request)
        if params is None:
            return validation_response("page and page_size must be integers")

        result = self.get_service().list_customer_orders(request.user, request.query_params.get("status"), *params)
        if not result.ok:
            return error_response(result)
        return Response(serialize_page(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_store",
        summary="List a store's orders",
        description="""
        **What it receives:**
        - `store_id` (UUID in URL, optional): Store to list. Without it the
          caller's own store is used (owned store, or assigned store for employees)
        - Optional status filter and pagination

        **What it returns:**
        - Paginated orders of the store, newest first
        """,
        parameters=LIST_PARAMETERS,
        responses={
            200: OrderListResponseSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not staff of this store"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Store not found"),
        },
        tags=["Orders"],
    )
    def store_orders(self, request, store_id=None):
        params = page_params(request)
        if params is None:
            return validation_response("page and page_size must be integers")

        service = self.get_service()
        status_filter = request.query_params.get("status")
        if store_id is None:
            result = service.list_managed_store_orders(request.user, status_filter, *params)
        else:
            result = service.list_store_orders(store_id, request.user, status_filter, *params)

        if not result.ok:
            return error_response(result)
        return Response(serialize_page(result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        responses={
            200: OrderSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not related to this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_update_status",
        summary="Update order status or payment",
        description="""
        **What it receives:**
        - `status`: processing ("in progress"), ready, completed or cancelled
        - `payment_status`, `payment_amount`, `payment_method` (all optional)

        Store staff move the order forward; marking `ready` issues a new pickup
        token. The order's customer may only cancel.
        """,
        request=UpdateOrderStatusRequestSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Transition not allowed"),
        },
        tags=["Orders"],
    )
    def update_status(self, request, pk=None):
        serializer = UpdateOrderStatusRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        result = self.get_service().update_status(pk, request.user, **serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_file",
        summary="Download an order attachment",
        responses={(200, "application/octet-stream"): bytes, 404: ErrorResponseSerializer},
        tags=["Orders"],
    )
    def file(self, request, pk=None, file_id=None):
        result = self.get_service().open_attachment(pk, file_id, request.user)
        if not result.ok:
            return error_response(result)
        return self._stream(*result.value, inline=False)

    @extend_schema(
        operation_id="orders_down_payment_receipt",
        summary="Download the down-payment receipt",
        responses={(200, "application/octet-stream"): bytes, 404: ErrorResponseSerializer},
        tags=["Orders"],
    )
    def down_payment_receipt(self, request, pk=None):
        result = self.get_service().open_down_payment_receipt(pk, request.user)
        if not result.ok:
            return error_response(result)
        return self._stream(*result.value, inline=False)

    @extend_schema(
        operation_id="orders_down_payment_preview",
        summary="Preview the down-payment receipt inline",
        responses={(200, "application/octet-stream"): bytes, 404: ErrorResponseSerializer},
        tags=["Orders"],
    )
    def down_payment_preview(self, request, pk=None):
        result = self.get_service().open_down_payment_receipt(pk, request.user)
        if not result.ok:
            return error_response(result)
        return self._stream(*result.value, inline=True)

    @staticmethod
    def _stream(attachment, stream, inline: bool) -> FileResponse:
        response = FileResponse(
            stream,
            as_attachment=not inline,
            filename=attachment.filename,
            content_type=attachment.mime_type or "application/octet-stream",
        )
        response["X-Content-Type-Options"] = "nosniff"
        return response


class PickupConfirmView(APIView):
    """
    Counter scan of a pickup QR code. Public: possession of the token is the
    credential.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="orders_pickup_confirm",
        summary="Confirm order pickup",
        description="""
        **What it receives:**
        - `token` (in URL): Pickup token issued when the order was marked ready

        **What it returns:**
        - The completed order's id, status and payment status
        - 404 if the token is unknown or already used, 410 if it expired
        """,
        request=None,
        responses={
            200: PickupConfirmResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid token"),
            410: OpenApiResponse(response=ErrorResponseSerializer, description="Token expired"),
        },
        tags=["Orders"],
    )
    def post(self, request, token=None):
        result = container.order_service().confirm_pickup(token)
        if not result.ok:
            return error_response(result)

        order = result.value
        return Response(
            {
                "order_id": str(order.id),
                "status": order.status,
                "payment_status": order.payment_status,
                "pickup_verified_at": order.pickup_verified_at,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="orders_pickup_confirm_get",
        summary="Confirm order pickup (QR link)",
        request=None,
        responses={200: PickupConfirmResponseSerializer},
        tags=["Orders"],
    )
    def get(self, request, token=None):
        return self.post(request, token)
