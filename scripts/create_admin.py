#!/usr/bin/env python3
"""
Create Admin Script

Admins cannot sign up through the API; provision them here.
Usage: python scripts/create_admin.py admin@example.com 's3cret-pass' "Site Admin" "+1-555-0100"
"""
import argparse
import sys
sys.path.insert(0, '.')

from careerbridge.core.errors import AccountExistsError
from careerbridge.db.mongodb import init_mongo_indexes
from careerbridge.models import UserRole
from careerbridge.services.account_service import provision_user
from careerbridge.services.identity_service import IdentityGateway
from careerbridge.services.mongo_service import get_mongo_services


def main():
    parser = argparse.ArgumentParser(description="Create a CareerBridge admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("name")
    parser.add_argument("phone", nargs="?", default="")
    args = parser.parse_args()

    init_mongo_indexes()
    gateway = IdentityGateway()
    services = get_mongo_services()

    try:
        identity, _ = provision_user(
            gateway,
            services["users"],
            email=args.email,
            password=args.password,
            name=args.name,
            phone=args.phone,
            role=UserRole.admin,
        )
    except AccountExistsError as e:
        print(f"❌ {e.detail}: {args.email}")
        return 1

    print(f"✅ Admin created: {identity.email} ({identity.uid})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
