#!/usr/bin/env python3
"""
Reset a company's password in the registration spreadsheet.

This script DOES NOT read or reveal any existing passwords.  It sets a
new password hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex") in the
``companies`` sheet for the given company username.  The spreadsheet
is the one configured through ``GOOGLE_SHEET_ID`` and
``GOOGLE_CREDENTIALS_FILE``.

Usage:
    python reset_company_password.py --username acme --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import sys

from registration_api.app.core.config import settings
from registration_api.app.services.company_service import CompanyService


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a company password in the companies sheet.")
    ap.add_argument("--username", required=True, help="Company username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not settings.google_sheet_id:
        print("[!] GOOGLE_SHEET_ID is not set", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    try:
        company = asyncio.run(CompanyService.set_password(args.username, new_password))
    except LookupError as e:
        print(f"[!] {e}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for company: {company.name} ({company.username})")


if __name__ == "__main__":
    main()
