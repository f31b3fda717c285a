"""
Marketplace API views.

Endpoints:
    GET    /api/v1/listings/                  List listings (filterable)
    POST   /api/v1/listings/                  Create a listing
    GET    /api/v1/listings/{id}/             Listing detail
    PUT    /api/v1/listings/{id}/             Replace a listing (seller only)
    PATCH  /api/v1/listings/{id}/             Update a listing (seller only)
    DELETE /api/v1/listings/{id}/             Delete a listing (seller only)
    POST   /api/v1/listings/{id}/mark-sold/   Mark a listing sold (seller only)
    POST   /api/v1/listings/upload/           Upload a listing image
    GET    /api/v1/messages/?user_email=      Messages for a participant
    POST   /api/v1/messages/                  Send a message
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    extend_schema,
    extend_schema_view,
    inline_serializer,
)
from rest_framework import filters, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFoundError, PermissionDeniedError, exception_for_result
from marketplace.filters import ListingFilter
from marketplace.models import Listing
from marketplace.permissions import IsSellerOrReadOnly
from marketplace.serializers import (
    ListingImageUploadSerializer,
    ListingSerializer,
    MessageCreateSerializer,
    MessageSerializer,
)
from marketplace.services import ListingImageService, ListingService, MessageService

# Service error codes that are not plain validation errors
MESSAGE_ERROR_EXCEPTIONS = {
    "NOT_A_PARTICIPANT": PermissionDeniedError,
    "LISTING_NOT_FOUND": NotFoundError,
}


@extend_schema_view(
    list=extend_schema(
        operation_id="list_listings",
        summary="List listings",
        tags=["Marketplace - Listings"],
    ),
    create=extend_schema(
        operation_id="create_listing",
        summary="Create listing",
        tags=["Marketplace - Listings"],
    ),
    retrieve=extend_schema(
        operation_id="get_listing",
        summary="Get listing",
        tags=["Marketplace - Listings"],
    ),
    update=extend_schema(
        operation_id="replace_listing",
        summary="Replace listing",
        tags=["Marketplace - Listings"],
    ),
    partial_update=extend_schema(
        operation_id="update_listing",
        summary="Update listing",
        tags=["Marketplace - Listings"],
    ),
    destroy=extend_schema(
        operation_id="delete_listing",
        summary="Delete listing",
        tags=["Marketplace - Listings"],
    ),
)
class ListingViewSet(viewsets.ModelViewSet):
    """
    ViewSet for listings.

    list:
        Public. Filter with ?category=, ?seller_email=, ?status= and
        ?search= (title/description).

    create:
        Create a listing for the current user. The payment account is
        filled in by the server.

    update / partial_update / destroy:
        Seller or staff only.

    mark_sold:
        Mark the listing sold.

    upload:
        Store an image and return its URL for use as ``image_url``.
    """

    queryset = Listing.objects.all()
    serializer_class = ListingSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = ListingFilter
    ordering_fields = ["created_at", "price"]
    ordering = ["-created_at"]

    def get_permissions(self):
        """Return permissions based on action."""
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        if self.action in ("create", "upload"):
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsSellerOrReadOnly()]

    def get_serializer_class(self):
        if self.action == "upload":
            return ListingImageUploadSerializer
        return ListingSerializer

    def create(self, request):
        """Create a listing owned by the current user."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ListingService.create_listing(
            seller=request.user,
            **serializer.validated_data,
        )
        if not result.success:
            raise exception_for_result(result, {})

        output_serializer = ListingSerializer(result.data, context={"request": request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="mark_listing_sold",
        summary="Mark listing sold",
        tags=["Marketplace - Listings"],
        request=None,
        responses={200: ListingSerializer},
    )
    @action(detail=True, methods=["post"], url_path="mark-sold")
    def mark_sold(self, request, pk=None):
        """Mark the listing sold."""
        listing = self.get_object()
        result = ListingService.mark_sold(listing)
        return Response(ListingSerializer(result.data).data)

    @extend_schema(
        operation_id="upload_listing_image",
        summary="Upload listing image",
        tags=["Marketplace - Listings"],
        request=ListingImageUploadSerializer,
        responses={
            201: inline_serializer(
                name="ListingImageUploadResponse",
                fields={"url": serializers.CharField()},
            )
        },
    )
    @action(
        detail=False,
        methods=["post"],
        url_path="upload",
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload(self, request):
        """Store an uploaded listing image."""
        serializer = ListingImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ListingImageService.store(serializer.validated_data["file"])
        if not result.success:
            return Response(
                result.to_response(),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"url": result.data}, status=status.HTTP_201_CREATED)


class MessageListCreateView(APIView):
    """
    Buyer/seller messages.

    GET returns every message where ``user_email`` is buyer or seller,
    oldest first. Users may only read their own conversations unless they
    are staff.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_messages",
        summary="List messages for a participant",
        tags=["Marketplace - Messages"],
        parameters=[
            OpenApiParameter(
                name="user_email",
                type=OpenApiTypes.EMAIL,
                location=OpenApiParameter.QUERY,
                description="Buyer or seller email",
            )
        ],
        responses={200: MessageSerializer(many=True)},
    )
    def get(self, request):
        user_email = request.query_params.get("user_email", "").strip()
        if not user_email:
            return Response([])

        if not request.user.is_staff and user_email.lower() != request.user.email.lower():
            raise PermissionDeniedError("You can only view your own messages")

        messages = MessageService.messages_for(user_email)
        return Response(MessageSerializer(messages, many=True).data)

    @extend_schema(
        operation_id="send_message",
        summary="Send a message",
        tags=["Marketplace - Messages"],
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
    )
    def post(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Missing required fields", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = MessageService.send_message(
            sender=request.user,
            **serializer.validated_data,
        )
        if not result.success:
            raise exception_for_result(result, MESSAGE_ERROR_EXCEPTIONS)

        return Response(
            MessageSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )
