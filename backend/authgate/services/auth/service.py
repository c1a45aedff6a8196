# authgate/services/auth/service.py
from __future__ import annotations

import logging
from functools import lru_cache

from authgate.services._shared.base import BaseService, ServiceContext
from authgate.services._shared.errors import AuthenticationError, ConflictError
from authgate.services._shared.ports import KeyValueStore, PasswordHasher, UserRecord, UserStore
from authgate.services.auth.dto import (
    AuthTokenConfig,
    ExternalIdentity,
    LoginIn,
    LogoutIn,
    PasswordResetIn,
    PasswordResetRequestIn,
    PasswordResetRequestOut,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)
from authgate.services.auth.tokens import INVALID_REFRESH_TOKEN, TokenIssuer, TokenRotator
from authgate.services.auth.utils import (
    generate_reset_token,
    generate_unusable_password,
    reset_password_key,
    resolve_display_name,
)

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_RESET_TOKEN = "Invalid or expired reset token"


@lru_cache(maxsize=8)
def _dummy_hash(hasher: PasswordHasher) -> str:
    # Verified against when the email is unknown so both failure paths cost one hash check
    return hasher.hash(generate_unusable_password())


class AuthService(BaseService):
    """
    Authentication flows: login, register, refresh, logout, password reset
    and federated login.

    Identity is established through :class:`UserStore` and
    :class:`PasswordHasher`; every token lifecycle step is delegated to
    :class:`TokenIssuer` / :class:`TokenRotator`.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        rotator: TokenRotator,
        kv: KeyValueStore,
        config: AuthTokenConfig,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param users: User persistence port.
        :param hasher: One-way password hashing port.
        :param issuer: Token pair minting.
        :param rotator: Refresh-token rotation and revocation.
        :param kv: Key-value store holding password-reset tokens.
        :param config: Token and reset lifetimes.
        """
        super().__init__(ctx=ctx)
        self.users = users
        self.hasher = hasher
        self.issuer = issuer
        self.rotator = rotator
        self.kv = kv
        self.cfg = config

    # ------------------------------------------------------------------ #
    # Credentials
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :raises AuthenticationError: Same message for unknown email and wrong password.
        """
        user = self.users.get_by_email(dto.email)
        if user is None:
            self.hasher.verify(dto.password, _dummy_hash(self.hasher))
            log.warning("Login failed")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not self.hasher.verify(dto.password, user.password_hash):
            log.warning("Login failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        pair = self.issuer.issue_for(user)
        log.info("Login succeeded", extra={"user_id": user.id})
        return pair

    def register(self, dto: RegisterIn) -> TokenPairOut:
        """
        Create a user and issue its first token pair.

        :raises ConflictError: If the email is already registered.
        """
        user = self.users.create(
            email=dto.email,
            display_name=resolve_display_name(dto.display_name, dto.email),
            password_hash=self.hasher.hash(dto.password),
            avatar=dto.avatar,
            phone=dto.phone,
        )
        log.info("User registered", extra={"user_id": user.id})
        return self.issuer.issue_for(user)

    # ------------------------------------------------------------------ #
    # Token lifecycle
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new pair.

        The user is re-loaded by the email in the consumed token so stale
        claims never outlive a profile change or a deletion.

        :raises AuthenticationError: Invalid, reused or orphaned refresh token.
        """
        claims = self.rotator.rotate(dto.refresh_token)
        email = claims.get("email")
        user = self.users.get_by_email(email) if isinstance(email, str) else None
        if user is None:
            log.warning("Refresh rejected: owner no longer exists")
            raise AuthenticationError(INVALID_REFRESH_TOKEN)
        return self.issuer.issue_for(user)

    def logout(self, dto: LogoutIn) -> dict[str, bool]:
        """Revoke the refresh token; succeeds for invalid or unknown tokens too."""
        result = self.rotator.revoke(dto.refresh_token)
        log.info("Logout processed")
        return result

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def request_password_reset(self, dto: PasswordResetRequestIn) -> PasswordResetRequestOut:
        """
        Start a reset without revealing whether the email exists.

        A token is always generated and returned; it is stored only for
        existing users, so tokens for unknown emails never redeem.
        """
        token = generate_reset_token()
        user = self.users.get_by_email(dto.email)
        if user is not None:
            self.kv.set_json(
                reset_password_key(token), {"email": user.email}, ttl=self.cfg.reset_ttl
            )
            log.info("Password reset requested", extra={"user_id": user.id})
        else:
            log.info("Password reset requested for unknown email")
        return PasswordResetRequestOut(token=token)

    def reset_password(self, dto: PasswordResetIn) -> dict[str, bool]:
        """
        Redeem a reset token once and replace the password.

        :raises AuthenticationError: Unknown, expired or already used token.
        """
        key = reset_password_key(dto.token)
        entry = self.kv.get_json(key)
        email = entry.get("email") if entry else None
        # Conditional delete: only one concurrent redeemer proceeds
        if not email or not self.kv.delete(key):
            log.warning("Password reset rejected")
            raise AuthenticationError(INVALID_RESET_TOKEN)

        user = self.users.get_by_email(email)
        if user is None:
            log.warning("Password reset rejected: owner no longer exists")
            raise AuthenticationError(INVALID_RESET_TOKEN)

        self.users.update(user.id, {"password_hash": self.hasher.hash(dto.new_password)})
        log.info("Password reset completed", extra={"user_id": user.id})
        return {"success": True}

    # ------------------------------------------------------------------ #
    # Federated
    # ------------------------------------------------------------------ #

    def federated_login(self, identity: ExternalIdentity) -> TokenPairOut:
        """
        Map a verified external identity to a local user by email.

        Unknown emails get a new user with a random unusable password.
        """
        user = self.users.get_by_email(identity.email) or self._create_federated(identity)
        log.info("Federated login succeeded", extra={"user_id": user.id})
        return self.issuer.issue_for(user)

    def _create_federated(self, identity: ExternalIdentity) -> UserRecord:
        try:
            user = self.users.create(
                email=identity.email,
                display_name=resolve_display_name(identity.display_name, identity.email),
                password_hash=self.hasher.hash(generate_unusable_password()),
                avatar=identity.avatar,
            )
        except ConflictError:
            # Created concurrently by another request
            existing = self.users.get_by_email(identity.email)
            if existing is None:
                raise
            return existing
        log.info("Federated user created", extra={"user_id": user.id})
        return user
