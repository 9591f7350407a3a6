"""
users/auth_views.py — Login-or-register, current account, logout


Purpose
===============================================================================
One credential-issuing endpoint plus its companions:
- POST /api/user/login   → log in, or register an unknown email as USER
- GET  /api/user/login   → resolve the presented token to its account
- POST /api/user/logout  → drop the authToken cookie


Login doubles as registration
- Known email + right password  → 200, isNewUser=false
- Known email + wrong password  → 401 InvalidCredentials
- Unknown email                 → account created with role USER, 201, isNewUser=true
This mirrors how the portal has always behaved. It also means guessing an
unregistered email creates an account instead of failing; deployments that
don't want that set PORTAL_AUTO_REGISTER=False and unknown emails get a 401.


Tokens
- The token is returned in the body (clients may mirror it in local storage)
  and set as the authToken cookie, which is what the admin gate reads.
- There is no server-side revocation: logout only clears the cookie.


Error shapes (see deptboard_backend.errors)
- 400 Validation failed (bad email, blank password)
- 401 Invalid password / Access token required
- 403 Invalid or expired token (GET)
- 404 User not found (GET; token outlived its account)
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework import permissions, status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.settings import api_settings as jwt_settings

from deptboard_backend.errors import InvalidCredentials, InvalidTokenResponse, Unauthenticated

from . import tokens
from .authentication import OptionalPortalTokenAuthentication
from .models import Account
from .serializers import AccountSerializer, LoginSerializer

# Swagger / OpenAPI
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Common response schemas for docs
# ---------------------------------------------------------------------------
ACCOUNT_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "id": openapi.Schema(type=openapi.TYPE_INTEGER),
        "email": openapi.Schema(type=openapi.TYPE_STRING, format="email"),
        "name": openapi.Schema(type=openapi.TYPE_STRING, x_nullable=True),
        "role": openapi.Schema(type=openapi.TYPE_STRING, enum=["ADMIN", "USER"]),
        "createdAt": openapi.Schema(type=openapi.TYPE_STRING, format="date-time"),
    },
)
LOGIN_RESPONSE_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    required=["message", "token", "user", "isNewUser"],
    properties={
        "message": openapi.Schema(type=openapi.TYPE_STRING),
        "token": openapi.Schema(type=openapi.TYPE_STRING, description="Session JWT (7 days)"),
        "user": ACCOUNT_SCHEMA,
        "isNewUser": openapi.Schema(type=openapi.TYPE_BOOLEAN),
    },
)


def _set_auth_cookie(response, token):
    response.set_cookie(
        settings.PORTAL_AUTH_COOKIE,
        token,
        max_age=int(jwt_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        samesite="Strict",
        secure=not settings.DEBUG,
    )


def _login_or_register(email, password, name):
    """Return (account, is_new) or raise InvalidCredentials."""
    account = Account.objects.filter(email__iexact=email).first()

    if account is None:
        if not settings.PORTAL_AUTO_REGISTER:
            logger.info("Login refused for unknown email (auto-registration disabled)")
            raise InvalidCredentials("Invalid email or password")
        try:
            with transaction.atomic():
                account = Account.objects.create_user(email=email, password=password, name=name)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            account = Account.objects.get(email__iexact=email)
        else:
            logger.info("Registered account %s via login", account.pk)
            return account, True

    if not account.is_active or not account.check_password(password):
        logger.info("Failed login for account %s", account.pk)
        raise InvalidCredentials()
    return account, False


class LoginView(APIView):
    """
    POST /api/user/login — log in or register (public).
    GET  /api/user/login — current account for the presented token.
    """
    # Lenient so a stale cookie never blocks logging in again; its Bearer
    # challenge keeps credential failures at 401.
    authentication_classes = [OptionalPortalTokenAuthentication]
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=["Auth"],
        operation_description=(
            "Log in with **email** + **password**. An unknown email is registered on the spot "
            "with role USER (unless the deployment disabled auto-registration).\n\n"
            "Also sets the `authToken` cookie."
        ),
        request_body=LoginSerializer,
        security=[],
        responses={
            200: openapi.Response("Logged in", LOGIN_RESPONSE_SCHEMA),
            201: openapi.Response("Account created", LOGIN_RESPONSE_SCHEMA),
            400: "Validation failed",
            401: "Invalid credentials",
        },
    )
    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        account, is_new = _login_or_register(data["email"], data["password"], data.get("name"))
        token = tokens.issue_for(account)

        response = Response(
            {
                "message": "Account created successfully" if is_new else "Login successful",
                "token": token,
                "user": AccountSerializer(account).data,
                "isNewUser": is_new,
            },
            status=status.HTTP_201_CREATED if is_new else status.HTTP_200_OK,
        )
        _set_auth_cookie(response, token)
        return response

    @swagger_auto_schema(
        tags=["Auth"],
        operation_description="Resolve the bearer token (header or authToken cookie) to its account.",
        responses={
            200: openapi.Response(
                "OK", openapi.Schema(type=openapi.TYPE_OBJECT, properties={"user": ACCOUNT_SCHEMA})
            ),
            401: "Access token required",
            403: "Invalid or expired token",
            404: "User not found",
        },
    )
    def get(self, request):
        raw_token = tokens.extract_raw_token(request)
        if raw_token is None:
            raise Unauthenticated()
        try:
            identity = tokens.verify(raw_token)
        except tokens.TokenVerificationError as exc:
            raise InvalidTokenResponse(code=exc.code) from exc

        account = Account.objects.filter(pk=identity.account_id).first()
        if account is None:
            raise NotFound("User not found")
        return Response({"user": AccountSerializer(account).data})


class LogoutView(APIView):
    """POST /api/user/logout — forget the cookie. Tokens stay valid until they expire."""
    authentication_classes = [OptionalPortalTokenAuthentication]
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=["Auth"],
        operation_description="Clear the `authToken` cookie. There is no server-side revocation.",
        security=[],
        responses={200: "OK"},
    )
    def post(self, request):
        response = Response({"message": "Logged out"}, status=status.HTTP_200_OK)
        response.delete_cookie(settings.PORTAL_AUTH_COOKIE, samesite="Strict")
        return response
