"""Invite domain service.

Owns the invite state machine:

    active -> active (redeemed, uses remaining)
    active -> consumed (usage_count == max_usage, still stored as active)
    active -> expired (derived from expires_at, never stored)
    active -> revoked (explicit, terminal)

Every store call goes through the StoreGateway, so a ServiceUnavailableError
surfaces unchanged and is never turned into a not-found.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from pavilion.config import InvitationSettings
from pavilion.domain.error import (
    DomainError,
    InviteAlreadyRevokedError,
    InviteExpiredError,
    InviteNotActiveError,
    InviteNotFoundError,
    InviteUsageExceededError,
    NotFoundError,
    ServiceUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from pavilion.domain.model.credential import CredentialPayload
from pavilion.domain.model.gallery import Gallery
from pavilion.domain.model.invite import Invite
from pavilion.domain.repository import (
    GalleryRepository,
    IdentityRepository,
    InviteRepository,
)
from pavilion.domain.value import (
    CapabilityBundle,
    GalleryId,
    InviteCode,
    InviteId,
    InviteKind,
    InviteStatus,
    Role,
    UserId,
    normalize_email,
)
from pavilion.persistence.error import DuplicateCodeError
from pavilion.persistence.gateway import StoreGateway

from .base import Service
from .capability import has_remaining_uses, is_expired
from .notification import InviteNotification, NotificationClient

CODE_ALPHABET = string.ascii_lowercase + string.digits
CODE_GENERATION_ATTEMPTS = 5


def mask_code(code: str) -> str:
    """Truncate an invite code for logs."""
    return code[:4] + "..."


def ensure_redeemable(invite: Invite, now: datetime) -> None:
    """Run the ordered redeemability checks.

    Stops at the first failing check so callers never learn whether a
    later condition would also have failed.

    Raises:
        InviteNotActiveError: If the stored status is not active
        InviteExpiredError: If expires_at has passed
        InviteUsageExceededError: If no redemptions remain
    """
    if invite.status != InviteStatus.ACTIVE:
        raise InviteNotActiveError("Invite is not active")
    if is_expired(invite, now):
        raise InviteExpiredError("Invite has expired")
    if not has_remaining_uses(invite):
        raise InviteUsageExceededError("Invite has reached its usage limit")


class InviteService(Service):
    """Domain service for the invite lifecycle."""

    def __init__(
        self,
        invite_repository: InviteRepository,
        gallery_repository: GalleryRepository,
        identity_repository: IdentityRepository,
        notification_client: NotificationClient,
        gateway: StoreGateway,
        settings: InvitationSettings,
        frontend_url: str,
    ) -> None:
        """Initialize invite service.

        Args:
            invite_repository: Invite repository
            gallery_repository: Gallery lookup
            identity_repository: Owner lookup for notification names
            notification_client: Invite email transport
            gateway: Retry wrapper for store calls
            settings: Invitation settings
            frontend_url: Base URL for invite access links
        """
        self.invite_repository = invite_repository
        self.gallery_repository = gallery_repository
        self.identity_repository = identity_repository
        self.notification_client = notification_client
        self.gateway = gateway
        self.settings = settings
        self.frontend_url = frontend_url.rstrip("/")

    def access_url(self, invite: Invite) -> str:
        """Link a guest follows to redeem an invite."""
        return f"{self.frontend_url}/invite?code={invite.code.root}"

    def generate_code(self) -> InviteCode:
        """Generate an unpredictable, already-normalized invite code."""
        return InviteCode(
            root="".join(
                secrets.choice(CODE_ALPHABET) for _ in range(self.settings.code_length)
            )
        )

    async def get_gallery(self, gallery_id: GalleryId) -> Gallery:
        """Get a gallery by ID.

        Raises:
            NotFoundError: If the gallery does not exist
        """
        gallery = await self.gateway.run(
            lambda: self.gallery_repository.find_by_id(gallery_id),
            name="gallery.find_by_id",
        )
        if gallery is None:
            raise NotFoundError("Gallery", str(gallery_id))
        return gallery

    def authorize_manager(self, caller: CredentialPayload, gallery: Gallery) -> None:
        """Only the gallery's owner or an administrator may manage its invites.

        Raises:
            UnauthorizedError: If the caller may not manage the gallery
        """
        match caller.role:
            case Role.ADMIN:
                return
            case Role.OWNER if str(gallery.owner_id) == caller.subject_id:
                return
            case Role.OWNER | Role.GUEST:
                logfire.warn(
                    "Invite management denied",
                    gallery_id=str(gallery.id),
                    subject_id=caller.subject_id,
                    role=caller.role.value,
                )
                raise UnauthorizedError("gallery", str(gallery.id), caller.subject_id)

    async def get_invite(self, invite_id: InviteId) -> Invite:
        """Get an invite by ID.

        Raises:
            InviteNotFoundError: If no invite has this ID
        """
        invite = await self.gateway.run(
            lambda: self.invite_repository.find_by_id(invite_id),
            name="invite.find_by_id",
        )
        if invite is None:
            raise InviteNotFoundError(str(invite_id))
        return invite

    async def create(
        self,
        caller: CredentialPayload,
        gallery_id: GalleryId,
        capabilities: CapabilityBundle,
        kind: InviteKind = InviteKind.SINGLE_USE,
        recipient_email: str | None = None,
        max_usage: int | None = None,
        expires_at: datetime | None = None,
        now: datetime | None = None,
    ) -> tuple[Invite, bool]:
        """Create an invite and announce it to its recipient.

        Args:
            caller: Credential of the owner or admin creating the invite
            gallery_id: Gallery the invite grants access to
            capabilities: Permissions a redeeming guest receives
            kind: Single- or multi-use
            recipient_email: Optional invitee binding, also the email target
            max_usage: Redemption limit for multi-use invites, None = unlimited
            expires_at: Optional expiry, defaults from settings
            now: Creation time, defaults to the current time

        Returns:
            Tuple of (created invite, whether the invite email was accepted)

        Raises:
            NotFoundError: If the gallery does not exist
            UnauthorizedError: If the caller does not own the gallery
            ValidationError: If the limits or expiry are inconsistent
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span(
            "invite_service.create",
            gallery_id=str(gallery_id),
            subject_id=caller.subject_id,
            kind=kind.value,
        ):
            gallery = await self.get_gallery(gallery_id)
            self.authorize_manager(caller, gallery)

            if kind == InviteKind.SINGLE_USE:
                max_usage = 1
            elif max_usage is not None and max_usage < 1:
                raise ValidationError("max_usage must be at least 1")

            if expires_at is None and self.settings.default_expiry_days:
                expires_at = now + timedelta(days=self.settings.default_expiry_days)
            if expires_at is not None and expires_at <= now:
                raise ValidationError("Expiry must be in the future")

            if recipient_email is not None:
                try:
                    recipient_email = normalize_email(recipient_email)
                except ValueError as e:
                    raise ValidationError(str(e)) from e

            invite = await self._insert_with_fresh_code(
                lambda code: Invite(
                    id=InviteId(uuid4()),
                    code=code,
                    gallery_id=gallery.id,
                    created_by=UserId(UUID(caller.subject_id)),
                    recipient_email=recipient_email,
                    kind=kind,
                    status=InviteStatus.ACTIVE,
                    capabilities=capabilities,
                    usage_count=0,
                    max_usage=max_usage,
                    expires_at=expires_at,
                    created_at=now,
                )
            )
            logfire.info(
                "Invite created",
                invite_id=str(invite.id),
                code=mask_code(invite.code.root),
                gallery_id=str(gallery.id),
                kind=kind.value,
                max_usage=max_usage,
            )

            delivered = False
            if invite.recipient_email:
                delivered = await self._notify(invite, gallery)
            return invite, delivered

    async def _insert_with_fresh_code(self, build) -> Invite:
        for attempt in range(1, CODE_GENERATION_ATTEMPTS + 1):
            code = self.generate_code()
            taken = await self.gateway.run(
                lambda: self.invite_repository.find_by_code(code),
                name="invite.find_by_code",
            )
            if taken is not None:
                logfire.warn("Invite code collision", attempt=attempt)
                continue

            invite = build(code)
            try:
                return await self.gateway.run(
                    lambda: self.invite_repository.add(invite),
                    name="invite.add",
                    retry=False,
                )
            except DuplicateCodeError:
                logfire.warn("Invite code taken concurrently", attempt=attempt)

        raise DomainError("Could not generate a unique invite code")

    async def validate(
        self,
        code: str | None = None,
        email: str | None = None,
        now: datetime | None = None,
    ) -> tuple[Invite, Gallery]:
        """Look up an invite and check that it can be redeemed.

        Exactly one of ``code`` or ``email`` must be supplied. Checks run in
        a fixed order and stop at the first failure: not found, not active,
        expired, usage exceeded.

        Args:
            code: Invite code, case-insensitive
            email: Recipient email; the newest invite for it is used
            now: Evaluation time, defaults to the current time

        Returns:
            Tuple of (invite, gallery it grants)

        Raises:
            ValidationError: If not exactly one lookup key was supplied
            InviteNotFoundError: If nothing matches, or its gallery is gone
            InviteNotActiveError: If the invite is not active
            InviteExpiredError: If the invite has expired
            InviteUsageExceededError: If no redemptions remain
        """
        now = now or datetime.now(timezone.utc)
        if (code is None) == (email is None):
            raise ValidationError("Provide either an invite code or an email")

        with logfire.span(
            "invite_service.validate",
            by="code" if code is not None else "email",
        ):
            invite = await self._lookup(code, email)
            try:
                ensure_redeemable(invite, now)
            except (InviteNotActiveError, InviteExpiredError, InviteUsageExceededError) as e:
                logfire.info(
                    "Invite rejected",
                    invite_id=str(invite.id),
                    reason=type(e).__name__,
                )
                raise

            gallery = await self.gateway.run(
                lambda: self.gallery_repository.find_by_id(invite.gallery_id),
                name="gallery.find_by_id",
            )
            if gallery is None:
                logfire.warn(
                    "Invite points at a missing gallery",
                    invite_id=str(invite.id),
                    gallery_id=str(invite.gallery_id),
                )
                raise InviteNotFoundError(str(invite.id))

            return invite, gallery

    async def _lookup(self, code: str | None, email: str | None) -> Invite:
        if code is not None:
            try:
                invite_code = InviteCode(root=code)
            except PydanticValidationError:
                # A malformed code cannot match any stored invite
                raise InviteNotFoundError(mask_code(code.strip()))
            invite = await self.gateway.run(
                lambda: self.invite_repository.find_by_code(invite_code),
                name="invite.find_by_code",
            )
            identifier = mask_code(invite_code.root)
        else:
            try:
                normalized = normalize_email(email or "")
            except ValueError as e:
                raise ValidationError(str(e)) from e
            invite = await self.gateway.run(
                lambda: self.invite_repository.find_latest_by_recipient_email(
                    normalized
                ),
                name="invite.find_by_email",
            )
            identifier = normalized

        if invite is None:
            logfire.info("Invite not found", identifier=identifier)
            raise InviteNotFoundError(identifier)
        return invite

    async def redeem(self, invite: Invite, now: datetime | None = None) -> Invite:
        """Consume one redemption of a validated invite.

        The check and the increment are one conditional update. When it
        matches nothing, the invite is re-read and the same ordered checks
        explain why; a concurrent consumer of the last use shows up as
        usage exceeded.

        Args:
            invite: Invite returned by validate
            now: Redemption time, defaults to the current time

        Returns:
            The invite with usage_count incremented and used_at set

        Raises:
            InviteNotFoundError: If the invite disappeared
            InviteNotActiveError: If it was revoked meanwhile
            InviteExpiredError: If it expired meanwhile
            InviteUsageExceededError: If another redemption took the last use
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span("invite_service.redeem", invite_id=str(invite.id)):
            redeemed = await self.gateway.run(
                lambda: self.invite_repository.redeem(invite.id, now),
                name="invite.redeem",
                retry=False,
            )
            if redeemed is not None:
                logfire.info(
                    "Invite redeemed",
                    invite_id=str(invite.id),
                    usage_count=redeemed.usage_count,
                    max_usage=redeemed.max_usage,
                )
                return redeemed

            current = await self.gateway.run(
                lambda: self.invite_repository.find_by_id(invite.id),
                name="invite.find_by_id",
            )
            if current is None:
                raise InviteNotFoundError(str(invite.id))
            ensure_redeemable(current, now)

            # Still looks redeemable: the only way to get here is a race on
            # the last remaining use
            logfire.info("Invite redemption lost race", invite_id=str(invite.id))
            raise InviteUsageExceededError("Invite has reached its usage limit")

    async def revoke(
        self,
        caller: CredentialPayload,
        invite_id: InviteId,
        now: datetime | None = None,
    ) -> Invite:
        """Revoke an invite.

        Args:
            caller: Credential of the owner or admin revoking the invite
            invite_id: Invite to revoke
            now: Revocation time, defaults to the current time

        Returns:
            The revoked invite

        Raises:
            InviteNotFoundError: If the invite does not exist
            UnauthorizedError: If the caller does not own the gallery
            InviteAlreadyRevokedError: If the invite was already revoked
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span(
            "invite_service.revoke",
            invite_id=str(invite_id),
            subject_id=caller.subject_id,
        ):
            invite = await self.get_invite(invite_id)
            gallery = await self.get_gallery(invite.gallery_id)
            self.authorize_manager(caller, gallery)

            revoked = await self.gateway.run(
                lambda: self.invite_repository.revoke(invite_id, now),
                name="invite.revoke",
                retry=False,
            )
            if revoked is None:
                current = await self.get_invite(invite_id)
                logfire.warn(
                    "Invite already revoked",
                    invite_id=str(invite_id),
                    status=current.status.value,
                )
                raise InviteAlreadyRevokedError("Invite is no longer active")

            logfire.info("Invite revoked", invite_id=str(invite_id))
            return revoked

    async def resend(
        self,
        caller: CredentialPayload,
        invite_id: InviteId,
        now: datetime | None = None,
    ) -> bool:
        """Re-deliver the invite email without changing the invite.

        Args:
            caller: Credential of the owner or admin
            invite_id: Invite to resend
            now: Evaluation time for the expiry check

        Returns:
            Whether the email transport accepted the message

        Raises:
            InviteNotFoundError: If the invite does not exist
            UnauthorizedError: If the caller does not own the gallery
            InviteAlreadyRevokedError: If the invite was revoked
            InviteExpiredError: If the invite has expired
            ValidationError: If the invite has no recipient email
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span(
            "invite_service.resend",
            invite_id=str(invite_id),
            subject_id=caller.subject_id,
        ):
            invite = await self.get_invite(invite_id)
            gallery = await self.get_gallery(invite.gallery_id)
            self.authorize_manager(caller, gallery)

            if invite.status == InviteStatus.REVOKED:
                raise InviteAlreadyRevokedError("Invite is no longer active")
            if is_expired(invite, now):
                raise InviteExpiredError("Invite has expired")
            if not invite.recipient_email:
                raise ValidationError("Invite has no recipient email to send to")

            return await self._notify(invite, gallery)

    async def list_for_gallery(
        self,
        caller: CredentialPayload,
        gallery_id: GalleryId,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        """List a gallery's invites, newest first.

        Raises:
            NotFoundError: If the gallery does not exist
            UnauthorizedError: If the caller does not own the gallery
        """
        with logfire.span(
            "invite_service.list_for_gallery",
            gallery_id=str(gallery_id),
            subject_id=caller.subject_id,
        ):
            gallery = await self.get_gallery(gallery_id)
            self.authorize_manager(caller, gallery)
            return await self.gateway.run(
                lambda: self.invite_repository.find_by_gallery(
                    gallery_id, limit=limit, offset=offset
                ),
                name="invite.find_by_gallery",
            )

    async def _notify(self, invite: Invite, gallery: Gallery) -> bool:
        """Send the invite email; failures are logged, never raised."""
        if not invite.recipient_email:
            return False
        try:
            owner = await self.gateway.run(
                lambda: self.identity_repository.find_by_id(gallery.owner_id),
                name="identity.find_by_id",
            )
        except ServiceUnavailableError as e:
            logfire.warn(
                "Invite email skipped, owner lookup failed",
                invite_id=str(invite.id),
                error=str(e),
            )
            return False

        notification = InviteNotification(
            recipient_email=invite.recipient_email,
            gallery_title=gallery.title,
            granter_name=owner.display_name if owner else "Your photographer",
            access_url=self.access_url(invite),
            capabilities=invite.capabilities,
            expires_at=invite.expires_at,
        )
        delivered = await self.notification_client.send_invite(notification)
        if not delivered:
            logfire.warn(
                "Invite email failed, invite kept",
                invite_id=str(invite.id),
                recipient=invite.recipient_email,
            )
        return delivered
