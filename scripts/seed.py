#!/usr/bin/env python3
"""
Seed script: creates a demo project with client/freelancer profiles and
three milestones covering release, high-risk hold and quality failure.
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from releasegate.config import settings
from releasegate.database import get_engine_url_and_connect_args
from releasegate.models import Milestone, Profile, Project

# Fixed ids so the seed is re-runnable
PROJECT_ID = "6f1c2a4e-0d3b-4a57-9a31-2b8e5c7d9f10"
CLIENT_ID = "0b7e4d2a-5c61-4f8e-8a9d-3c2b1a0f9e81"
FREELANCER_ID = "9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"
LOW_TRUST_FREELANCER_ID = "1d2c3b4a-5f6e-4d7c-9b8a-0f1e2d3c4b5a"
MILESTONE_IDS = [
    "a1b2c3d4-e5f6-4a7b-8c9d-0e1f2a3b4c5d",
    "b2c3d4e5-f6a7-4b8c-9d0e-1f2a3b4c5d6e",
    "c3d4e5f6-a7b8-4c9d-8e1f-2a3b4c5d6e7f",
]


async def seed():
    url, connect_args = get_engine_url_and_connect_args(
        settings.database_url, settings.database_ssl_verify
    )
    engine = create_async_engine(url, connect_args=connect_args)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    now = datetime.now(timezone.utc)
    now_iso = now.strftime("%Y-%m-%dT%H:%M:%SZ")

    async with async_session() as session:
        existing = await session.execute(select(Project).where(Project.id == PROJECT_ID))
        if existing.scalar_one_or_none():
            print("Project already exists, nothing to do.")
            await engine.dispose()
            return

        session.add_all(
            [
                Profile(id=CLIENT_ID, user_type="client", display_name="Demo Client"),
                Profile(
                    id=FREELANCER_ID,
                    user_type="freelancer",
                    display_name="Trusted Freelancer",
                    trust_score=95,
                ),
                Profile(
                    id=LOW_TRUST_FREELANCER_ID,
                    user_type="freelancer",
                    display_name="New Freelancer",
                    trust_score=60,
                ),
            ]
        )
        session.add(
            Project(
                id=PROJECT_ID,
                client_id=CLIENT_ID,
                freelancer_id=FREELANCER_ID,
                title="Landing page redesign",
                status="active",
                rule_version="2.1.0",
                budget=Decimal("3500"),
                escrow_balance=Decimal("3500"),
                created_at=now_iso,
            )
        )
        await session.flush()

        session.add_all(
            [
                # On time, delivered, small amount -> RELEASE
                Milestone(
                    id=MILESTONE_IDS[0],
                    project_id=PROJECT_ID,
                    freelancer_id=FREELANCER_ID,
                    title="Wireframes",
                    amount=Decimal("500"),
                    due_date=now + timedelta(days=5),
                    status="submitted",
                    submission_file_url="https://files.example.com/wireframes.pdf",
                    created_at=now_iso,
                ),
                # Late, undelivered, high value, low trust -> HOLD (high risk)
                Milestone(
                    id=MILESTONE_IDS[1],
                    project_id=PROJECT_ID,
                    freelancer_id=LOW_TRUST_FREELANCER_ID,
                    title="Full build",
                    amount=Decimal("2000"),
                    due_date=now - timedelta(days=10),
                    status="pending",
                    created_at=now_iso,
                ),
                # Undelivered, small amount -> DISPUTE (quality fail)
                Milestone(
                    id=MILESTONE_IDS[2],
                    project_id=PROJECT_ID,
                    freelancer_id=FREELANCER_ID,
                    title="Copy review",
                    amount=Decimal("1000"),
                    due_date=now + timedelta(days=3),
                    status="pending",
                    created_at=now_iso,
                ),
            ]
        )
        await session.commit()

    await engine.dispose()

    print("Seed complete!")
    print(f"Project: {PROJECT_ID}")
    for mid in MILESTONE_IDS:
        print("Example: curl -X POST http://localhost:8000/v1/milestones/" + mid + "/decisions \\")
        print('  -H "Content-Type: application/json" \\')
        print("  -d '{\"project_id\":\"" + PROJECT_ID + "\"}'")


if __name__ == "__main__":
    asyncio.run(seed())
