"""
dsauthz Demo Application

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

This demo walks a component through its lifecycle:
- Credential issuance and verification
- Creation in draft
- Submission for review by the owner
- Refused approval by the owner, approval by an admin
- Refused deletion by a designer, deletion by an admin
- Audit log retrieval
"""

import asyncio
import logging
import sys

from dsauthz.auth.jwt import CredentialIssuer
from dsauthz.core.config import Config, TokenConfig
from dsauthz.core.service import AccessControl
from dsauthz.core.types import Identity, ResourceKind, Role, Status
from dsauthz.types.errors import AccessControlError, Forbidden


async def main() -> int:
    """Main demo function"""
    print("dsauthz Demo Application")
    print("=" * 50)
    print()

    config = Config(token=TokenConfig(secret_key="demo-secret-key-for-local-walkthroughs-only"))

    try:
        access = AccessControl.new(config)
        issuer = CredentialIssuer(config.token)
        print("✓ Created access control service")
        print(f"  - Algorithm: {config.token.algorithm}")
        print(f"  - Token Expiry: {config.token.expiry}")
        print()
    except AccessControlError as e:
        print(f"✗ Error creating service: {e}")
        return 1

    alice = Identity(id="u-alice", username="alice", role=Role.DESIGNER)
    bob = Identity(id="u-bob", username="bob", role=Role.DESIGNER)
    admin = Identity(id="u-admin", username="admin", role=Role.ADMIN)

    print("Step 1: Credential Issuance and Verification")
    print("-" * 40)
    for person in (alice, bob, admin):
        token = issuer.issue(person)
        verified = access.verify(token)
        print(f"✓ {verified.username} verified as {verified.role}")
    print()

    print("Step 2: Component Lifecycle")
    print("-" * 40)
    component = await access.create_resource(alice, ResourceKind.COMPONENT, {
        "name": "Button",
        "description": "Primary action button",
        "category": "button",
    })
    print(f"✓ alice created {component.payload['name']} ({component.status})")

    component = await access.update_resource(alice, component.id, {"status": "review"})
    print(f"✓ alice submitted for review ({component.status})")

    attempts = [
        ("bob edits alice's component", access.update_resource(bob, component.id, {"name": "Hijacked"})),
        ("alice approves her own component", access.change_status(alice, component.id, Status.APPROVED)),
    ]
    for label, attempt in attempts:
        try:
            await attempt
            print(f"✗ {label}: unexpectedly allowed")
        except Forbidden as e:
            print(f"✓ {label}: denied ({e.reason})")

    component = await access.change_status(admin, component.id, Status.APPROVED)
    print(f"✓ admin approved ({component.status})")

    try:
        await access.delete_resource(alice, component.id)
        print("✗ alice deleted the component: unexpectedly allowed")
    except Forbidden as e:
        print(f"✓ alice deletes the component: denied ({e.reason})")

    await access.delete_resource(admin, component.id)
    print("✓ admin deleted the component")
    print()

    print("Step 3: Audit Log")
    print("-" * 40)
    for event in await access.audit_logger.get_events():
        print(f"  {event.timestamp:%H:%M:%S} {event.actor_id:<8} {event.event_type:<17} "
              f"{event.outcome}{' (' + event.reason + ')' if event.reason else ''}")

    await access.close()
    print()
    print("Demo completed.")
    return 0


def run() -> None:
    logging.basicConfig(level=logging.WARNING)
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
