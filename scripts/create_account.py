#!/usr/bin/env python3
"""Create or update an owner or administrator account.

Owners and admins sign in with a password; there is no self-service sign-up.

Usage:
    python scripts/create_account.py owner@example.com "Ada Lens" \
        --role owner --gallery "Autumn Wedding"

The password is read from the ACCOUNT_PASSWORD environment variable or
prompted for.
"""

import argparse
import asyncio
import getpass
import os
import sys
from uuid import uuid4

import logfire

from pavilion.config import Settings
from pavilion.domain.model import Gallery, Identity
from pavilion.domain.value import GalleryId, Role, UserId, normalize_email
from pavilion.persistence.database import create_engine, create_session_factory
from pavilion.persistence.repository import (
    PostgresGalleryRepository,
    PostgresIdentityRepository,
)
from pavilion.util.observability import configure_logfire
from pavilion.util.password import hash_password


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an owner or admin account")
    parser.add_argument("email")
    parser.add_argument("display_name")
    parser.add_argument(
        "--role", choices=[Role.OWNER.value, Role.ADMIN.value], default="owner"
    )
    parser.add_argument("--gallery", help="Also create a gallery with this title")
    return parser.parse_args(argv)


async def create_account(
    settings: Settings,
    email: str,
    display_name: str,
    role: Role,
    password: str,
    gallery_title: str | None,
) -> None:
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    identities = PostgresIdentityRepository(session_factory)
    galleries = PostgresGalleryRepository(session_factory)

    try:
        identity = await identities.save(
            Identity(
                id=UserId(uuid4()),
                email=email,
                role=role,
                display_name=display_name,
                password_hash=hash_password(password),
            )
        )
        logfire.info("Account saved", user_id=str(identity.id), role=role.value)

        if gallery_title:
            gallery = await galleries.save(
                Gallery(
                    id=GalleryId(uuid4()),
                    owner_id=identity.id,
                    title=gallery_title,
                )
            )
            logfire.info("Gallery created", gallery_id=str(gallery.id))
            print(f"Gallery {gallery.id}: {gallery.title}")

        print(f"Account {identity.id} ({identity.role.value}): {identity.email}")
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings()
    configure_logfire(settings)

    try:
        email = normalize_email(args.email)
    except ValueError as e:
        print(f"Invalid email: {e}", file=sys.stderr)
        return 1

    password = os.environ.get("ACCOUNT_PASSWORD") or getpass.getpass("Password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters", file=sys.stderr)
        return 1

    asyncio.run(
        create_account(
            settings,
            email=email,
            display_name=args.display_name,
            role=Role(args.role),
            password=password,
            gallery_title=args.gallery,
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
