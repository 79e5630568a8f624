#!/usr/bin/env python3
"""
Create (or reset) an admin user and give them an organization.
Usage: python create_admin.py <email> <password> <organization name>
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from precosmart.core.database import SessionLocal
from precosmart.core.roles import Role
from precosmart.core.security import hash_password
from precosmart.models.membership import Membership
from precosmart.models.organization import Organization
from precosmart.models.user import User
from precosmart.services.organization_service import create_organization


def create_admin(email: str, password: str, organization_name: str):
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if user:
            user.hashed_password = hash_password(password)
            db.commit()
            print(f"Password reset for existing user '{email}'")
        else:
            user = User(email=email.lower(), name=email.split("@")[0], hashed_password=hash_password(password))
            db.add(user)
            db.commit()
            db.refresh(user)
            print(f"User '{email}' created with ID: {user.id}")

        organization = (
            db.query(Organization)
            .join(Membership, Membership.organization_id == Organization.id)
            .filter(Membership.user_id == user.id, Organization.name == organization_name)
            .first()
        )
        if organization:
            membership = db.query(Membership).filter(
                Membership.user_id == user.id, Membership.organization_id == organization.id
            ).first()
            membership.role = Role.admin.value
            db.commit()
            print(f"Found organization '{organization_name}' with ID: {organization.id}")
        else:
            organization = create_organization(db, user, organization_name)
            print(f"Organization '{organization_name}' created with ID: {organization.id}")

        print(f"\n{'='*50}")
        print(f"Email: {user.email}")
        print(f"Organization: {organization.name} (id={organization.id})")
        print(f"Role: {Role.admin.value}")
        print(f"{'='*50}")
    except Exception as e:
        db.rollback()
        print(f"\nError creating admin user: {e}")
        raise
    finally:
        db.close()


if __name__ == '__main__':
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    create_admin(sys.argv[1], sys.argv[2], sys.argv[3])
