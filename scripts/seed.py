#!/usr/bin/env python3
"""
Seed Database
=============

Drops and recreates the tables, then loads three demo accounts and five
sample tickets.

Usage:
    python -m scripts.seed
"""

import asyncio
import sys

from helpdesk.auth.domain import User
from helpdesk.auth.infrastructure import BcryptPasswordHasher, SQLAlchemyUserRepository
from helpdesk.config import Category, Priority, Role, TicketStatus, get_settings
from helpdesk.infrastructure.database import Database
from helpdesk.tickets.domain import Ticket
from helpdesk.tickets.infrastructure import SQLAlchemyTicketRepository

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"name": "John Agent", "email": "agent@superops.com", "role": Role.AGENT},
    {"name": "Sarah Admin", "email": "admin@superops.com", "role": Role.ADMIN},
    {"name": "Mike Support", "email": "mike@superops.com", "role": Role.AGENT},
]

# creator / assignee are indexes into the created users and agents
SAMPLE_TICKETS = [
    {
        "title": "Login page not loading",
        "description": "The login page shows a blank screen after clicking submit button. "
                       "This started happening after the latest update.",
        "priority": Priority.HIGH,
        "category": Category.BUG_REPORT,
        "status": TicketStatus.OPEN,
        "creator": 0,
        "assignee": 0,
    },
    {
        "title": "Add dark mode feature",
        "description": "Users are requesting a dark mode toggle in the settings. This would improve "
                       "user experience for users working in low-light environments.",
        "priority": Priority.LOW,
        "category": Category.FEATURE_REQUEST,
        "status": TicketStatus.OPEN,
        "creator": 1,
        "assignee": 0,
    },
    {
        "title": "Payment processing failed",
        "description": "Customer unable to process payment for premium subscription. "
                       "Error message shows \"Payment gateway timeout\".",
        "priority": Priority.URGENT,
        "category": Category.BILLING,
        "status": TicketStatus.IN_PROGRESS,
        "creator": 0,
        "assignee": 1,
    },
    {
        "title": "API rate limiting documentation",
        "description": "Need comprehensive documentation for API rate limiting policies "
                       "and best practices for developers.",
        "priority": Priority.MEDIUM,
        "category": Category.TECHNICAL,
        "status": TicketStatus.OPEN,
        "creator": 1,
        "assignee": 0,
    },
    {
        "title": "Email notifications not working",
        "description": "Users report not receiving email notifications for ticket updates. "
                       "SMTP configuration might need review.",
        "priority": Priority.HIGH,
        "category": Category.BUG_REPORT,
        "status": TicketStatus.RESOLVED,
        "creator": 0,
        "assignee": 1,
    },
]


async def seed_users(database: Database, rounds: int) -> list:
    hasher = BcryptPasswordHasher(rounds)

    async with database.session() as session:
        repository = SQLAlchemyUserRepository(session)
        users = []
        for row in DEMO_USERS:
            users.append(await repository.create(User(
                id=None,
                name=row["name"],
                email=row["email"],
                role=row["role"],
                password_hash=hasher.hash(DEMO_PASSWORD),
            )))

    print(f"Seeded {len(users)} users")
    return users


async def seed_tickets(database: Database, users: list) -> int:
    agents = [user for user in users if user.role == Role.AGENT]
    if not agents:
        print("No agents found, skipping ticket seeding")
        return 0

    async with database.session() as session:
        repository = SQLAlchemyTicketRepository(session)
        for row in SAMPLE_TICKETS:
            assignee = agents[min(row["assignee"], len(agents) - 1)]
            # A resolved sample gets its resolved_at stamped by the entity
            await repository.create(Ticket(
                id=None,
                title=row["title"],
                description=row["description"],
                priority=row["priority"],
                category=row["category"],
                status=row["status"],
                created_by=users[row["creator"]].id,
                assigned_to=assignee.id,
            ))

    print(f"Seeded {len(SAMPLE_TICKETS)} tickets")
    return len(SAMPLE_TICKETS)


async def main() -> int:
    settings = get_settings()
    database = Database.from_settings(settings)

    print("Starting database seeding...")
    try:
        await database.drop_tables()
        await database.create_tables()

        users = await seed_users(database, settings.bcrypt_rounds)
        await seed_tickets(database, users)
    finally:
        await database.close()

    print("Database seeding completed")
    print("\nTest accounts:")
    for row in DEMO_USERS:
        print(f"  {row['role']}: {row['email']} / {DEMO_PASSWORD}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
