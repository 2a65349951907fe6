import json
import logging

from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from rest_framework import viewsets, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from subscriptionDesk.services import apply_tier_snapshot, free_plan
from walletDesk.services import seed_free_tier_wallets
from .serializers import SignupSerializer, LoginSerializer, issue_tokens

logger = logging.getLogger(__name__)


class AuthViewSet(viewsets.GenericViewSet):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_serializer_class(self):
        if self.action == 'register':
            return SignupSerializer
        return LoginSerializer

    def register(self, request):
        """
        POST /api/auth/signup/
        Body: { "name", "email", "phone"?, "password" }
        Creates a FREE member with an empty funding wallet and a seeded redeem wallet.
        """
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Registration failed: {serializer.errors}")
            raise ValidationError(serializer.errors)

        with transaction.atomic():
            user = serializer.save()
            plan = free_plan()
            if plan is not None:
                apply_tier_snapshot(user, plan)
                user.save()
            seed_free_tier_wallets(user)

        logger.info(f"User registered: {user.email}")
        return Response(issue_tokens(user), status=status.HTTP_201_CREATED)

    def login(self, request):
        serializer = self.get_serializer(data=request.data)
        if serializer.is_valid():
            logger.info(f"User logged in: {serializer.validated_data['email']}")
            return Response(serializer.validated_data, status=status.HTTP_200_OK)
        logger.warning(f"Login failed: {serializer.errors}")
        raise ValidationError(serializer.errors)


@csrf_exempt
def logout_view(request):
    if request.method != 'POST':
        return JsonResponse({"error": "Method not allowed"}, status=405)

    try:
        data = json.loads(request.body.decode('utf-8') or '{}')
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to decode JSON: {str(e)}")
        return JsonResponse({"error": "Invalid JSON format"}, status=400)

    refresh_token = data.get('refresh_token')
    if not refresh_token:
        return JsonResponse({"error": "Refresh token is required"}, status=400)

    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError as e:
        logger.warning(f"Logout failed: {str(e)}")
        return JsonResponse({"error": f"Invalid token: {str(e)}"}, status=400)

    logger.info("Refresh token blacklisted")
    return JsonResponse({"message": "Logged out successfully"}, status=200)
