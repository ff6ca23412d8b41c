"""
Purpose: Guardrails for the contact form.
Errors are returned to the UI field by field; the store never validates and
trusts whatever the form hands it.
"""

import re

EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE = re.compile(r"^[\d\s\-+()]+$")

MAX_FIELD_CHARS = 200


def validate_contact(name: str, email: str, phone: str) -> dict[str, str]:
    """Return {field: message} for every invalid field; empty dict when valid."""
    errors: dict[str, str] = {}
    name, email, phone = (name or "").strip(), (email or "").strip(), (phone or "").strip()

    if not name:
        errors["name"] = "Name is required"
    elif len(name) > MAX_FIELD_CHARS:
        errors["name"] = "Name is too long"

    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL.match(email):
        errors["email"] = "Please enter a valid email address"

    if not phone:
        errors["phone"] = "Phone number is required"
    elif not PHONE.match(phone):
        errors["phone"] = "Please enter a valid phone number"

    return errors


def missing_contact_fields(name: str, email: str, phone: str) -> list[str]:
    """Fields the candidate still has to fill in, in form order."""
    values = {"name": name, "email": email, "phone": phone}
    return [k for k, v in values.items() if not (v or "").strip()]
