#!/usr/bin/env python3
"""Create (or promote) an admin account: create_admin.py EMAIL PASSWORD"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from outreach_cms import crud
from outreach_cms.core.config import settings
from outreach_cms.db.database import build_engine, build_session_factory
from outreach_cms.models.user import UserRole
from outreach_cms.schemas.user import MIN_PASSWORD_LENGTH


def create_admin(email: str, password: str) -> int:
    engine = build_engine(settings.DATABASE_URL)
    SessionLocal = build_session_factory(engine)
    db = SessionLocal()

    try:
        user = crud.user.get_by_email(db, email=email)
        if not user:
            if len(password) < MIN_PASSWORD_LENGTH:
                print(f'❌ Password must be at least {MIN_PASSWORD_LENGTH} characters long')
                return 1
            user = crud.user.create_user(db, email=email, password=password)
            if user is None:
                print(f'❌ Could not create {email}: the email was registered concurrently')
                return 1
            print(f'✅ Account created: {email}')

        if user.role == UserRole.ADMIN:
            print(f'ℹ️  {email} is already an admin')
        else:
            crud.user.update_role(db, id=user.id, role=UserRole.ADMIN)
            print(f'✅ {email} promoted to admin')
        return 0
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/create_admin.py EMAIL PASSWORD")
        sys.exit(2)
    sys.exit(create_admin(sys.argv[1], sys.argv[2]))
