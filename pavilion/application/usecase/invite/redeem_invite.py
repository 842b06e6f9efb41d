"""Redeem invite use case."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire
from pydantic import BaseModel

from pavilion.application.usecase.base import BaseUseCase
from pavilion.application.usecase.invite.common import GalleryInfo, InviteMeta
from pavilion.domain.error import ValidationError
from pavilion.domain.model import CredentialClaims
from pavilion.domain.service import IdentityService, InviteService, JWTService
from pavilion.domain.service.capability import derive_capabilities
from pavilion.domain.service.invite_service import mask_code
from pavilion.domain.value import CapabilityBundle, Role, normalize_email

GUEST_EMAIL_DOMAIN = "guests.invalid"


class RedeemInviteRequest(BaseModel):
    """Redemption by invite code or by recipient email.

    With a code, ``email`` is optional and names the guest; it must match
    the invite's recipient when the invite is bound to one. Without a code,
    ``email`` is the lookup key.
    """

    code: str | None = None
    email: str | None = None


class RedeemInviteResponse(BaseModel):
    """Guest session granted by a redemption."""

    token: str
    expires_in: int  # Seconds, for the cookie max-age
    user_id: str
    gallery: GalleryInfo
    capabilities: CapabilityBundle
    invite: InviteMeta


class RedeemInviteUseCase(BaseUseCase):
    """Use case for turning an invite into a guest credential."""

    def __init__(
        self,
        invite_service: InviteService,
        identity_service: IdentityService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
            identity_service: Identity domain service
            jwt_service: JWT token domain service
        """
        self.invite_service = invite_service
        self.identity_service = identity_service
        self.jwt_service = jwt_service

    async def execute(self, request: RedeemInviteRequest) -> RedeemInviteResponse:
        """Execute the redemption flow.

        Steps:
        1. Validate the invite (ordered checks, nothing consumed)
        2. Check the supplied email against the invite's recipient
        3. Find or create the guest identity
        4. Consume one use with the atomic conditional update
        5. Mint a guest credential scoped to the invite's gallery

        Args:
            request: Code and/or email

        Returns:
            Guest token, gallery summary and granted capabilities

        Raises:
            ValidationError: If the input is malformed, the email mismatches
                or the email belongs to an owner or admin
            InviteValidationError: If the invite cannot be redeemed
        """
        now = datetime.now(timezone.utc)
        with logfire.span("redeem_invite.execute"):
            if request.code is not None:
                invite, gallery = await self.invite_service.validate(
                    code=request.code, now=now
                )
                guest_email = self._claimed_email(request.email)
                if (
                    guest_email
                    and invite.recipient_email
                    and guest_email != invite.recipient_email
                ):
                    logfire.warn(
                        "Invite email mismatch", code=mask_code(invite.code.root)
                    )
                    raise ValidationError("Email does not match invite")
            else:
                invite, gallery = await self.invite_service.validate(
                    email=request.email, now=now
                )
                guest_email = invite.recipient_email

            email = guest_email or invite.recipient_email
            if email:
                guest = await self.identity_service.resolve_guest(
                    email, display_name=email.split("@")[0]
                )
            else:
                # Each anonymous redemption is its own guest
                guest = await self.identity_service.create_guest(
                    f"guest-{uuid4().hex}@{GUEST_EMAIL_DOMAIN}", display_name="Guest"
                )

            redeemed = await self.invite_service.redeem(invite, now=now)
            capabilities = derive_capabilities(redeemed)

            token = self.jwt_service.issue(
                CredentialClaims(
                    subject_id=str(guest.id),
                    email=guest.email,
                    role=Role.GUEST,
                    owner_profile_id=gallery.owner_id,
                    guest_profile_id=guest.id,
                    resource_id=gallery.id,
                    invite_code=redeemed.code.root,
                    permissions=capabilities,
                ),
                now=now,
            )

            logfire.info(
                "Guest session granted",
                user_id=str(guest.id),
                gallery_id=str(gallery.id),
                code=mask_code(redeemed.code.root),
            )
            return RedeemInviteResponse(
                token=token,
                expires_in=self.jwt_service.lifetime_seconds,
                user_id=str(guest.id),
                gallery=GalleryInfo.from_gallery(gallery),
                capabilities=capabilities,
                invite=InviteMeta.from_invite(redeemed),
            )

    @staticmethod
    def _claimed_email(email: str | None) -> str | None:
        if email is None or not email.strip():
            return None
        try:
            return normalize_email(email)
        except ValueError as e:
            raise ValidationError(str(e)) from e
