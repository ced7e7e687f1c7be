"""
Input Validation
================
Client-side checks for emails, names and passwords.

Every check runs before any network call so malformed input is reported
inline and never reaches the backend.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from .constants import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PASSWORD_MIN_LENGTH,
    PASSWORD_SYMBOLS,
)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
DOMAIN_LABEL_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")
TLD_PATTERN = re.compile(r"^[a-zA-Z]+$")

NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
NAME_DISALLOWED = re.compile(r"[^a-zA-Z\s\-']")
NAME_REPEATED_SEPARATOR = re.compile(r"[\s\-']{2,}")
NAME_EDGE_SEPARATOR = re.compile(r"^[\s\-']|[\s\-']$")

# Providers whose misspellings get a targeted hint
PROVIDER_HINTS = ("gmail.com", "yahoo.com", "hotmail.com", "outlook.com")


@dataclass
class ValidationResult:
    """Outcome of a single field check."""
    is_valid: bool
    error: str = ""
    normalized: Optional[str] = None


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email address."""
    if not email:
        return ""
    return email.strip().lower()


def validate_email(email: Optional[str]) -> ValidationResult:
    """
    Validate an email address.

    Args:
        email: Raw input

    Returns:
        ValidationResult whose ``normalized`` holds the trimmed, lowercased address
    """
    if not email or not email.strip():
        return ValidationResult(False, "Email is required")

    normalized = normalize_email(email)
    if not EMAIL_PATTERN.match(normalized):
        return ValidationResult(False, "Please enter a valid email address")

    local_part, _, domain = normalized.partition("@")

    if not local_part or len(local_part) > 64:
        return ValidationResult(False, "Invalid email format")
    if ".." in local_part:
        return ValidationResult(False, "Email cannot contain consecutive dots")
    if local_part.startswith(".") or local_part.endswith("."):
        return ValidationResult(False, "Email cannot start or end with a dot")

    if not domain or len(domain) > 255:
        return ValidationResult(False, "Invalid email domain")

    labels = domain.split(".")
    if len(labels) < 2:
        return ValidationResult(
            False, "Please enter a complete email address (e.g., user@example.com)"
        )
    for label in labels:
        if not label or len(label) > 63:
            return ValidationResult(False, "Invalid email domain format")
        if not DOMAIN_LABEL_PATTERN.match(label):
            return ValidationResult(False, "Invalid characters in email domain")
        if label.startswith("-") or label.endswith("-"):
            return ValidationResult(False, "Invalid email domain format")

    tld = labels[-1]
    if len(tld) < 2 or not TLD_PATTERN.match(tld):
        return ValidationResult(False, "Please enter a valid email domain (e.g., .com, .org)")

    for provider in PROVIDER_HINTS:
        name = provider.split(".")[0]
        if name in domain and domain != provider:
            return ValidationResult(False, f"Did you mean @{provider}?")

    return ValidationResult(True, normalized=normalized)


def validate_new_email(candidate: Optional[str], current_email: Optional[str]) -> ValidationResult:
    """Check a replacement address against format rules and the current address."""
    if not candidate or not candidate.strip():
        return ValidationResult(False, "New email is required")

    result = validate_email(candidate)
    if not result.is_valid:
        return result
    if result.normalized == normalize_email(current_email):
        return ValidationResult(False, "New email cannot be the same as current email")
    return result


def mask_email(email: Optional[str]) -> str:
    """Mask an email for logs, keeping the first character and the domain."""
    if not email:
        return ""
    local_part, sep, domain = email.partition("@")
    if not sep:
        return "****"
    return f"{local_part[:1]}****@{domain}"


def filter_name_input(value: str) -> str:
    """Drop characters a name field does not accept as the user types."""
    return NAME_DISALLOWED.sub("", value or "")


def validate_name(name: Optional[str]) -> ValidationResult:
    """Validate a first or last name."""
    if not name or not name.strip():
        return ValidationResult(False, "This field is required")

    name = name.strip()
    if len(name) < NAME_MIN_LENGTH:
        return ValidationResult(False, f"Must be at least {NAME_MIN_LENGTH} characters long")
    if len(name) > NAME_MAX_LENGTH:
        return ValidationResult(False, f"Must be less than {NAME_MAX_LENGTH} characters long")
    if not NAME_PATTERN.match(name):
        return ValidationResult(False, "Only letters, spaces, hyphens, and apostrophes are allowed")
    if NAME_REPEATED_SEPARATOR.search(name):
        return ValidationResult(False, "No consecutive spaces or special characters allowed")
    if NAME_EDGE_SEPARATOR.search(name):
        return ValidationResult(False, "Cannot start or end with spaces or special characters")
    return ValidationResult(True, normalized=name)


@dataclass
class PasswordStrength:
    """Password strength classification."""
    strength: str
    score: int
    label: str
    criteria: Dict[str, bool] = field(default_factory=dict)


def check_password_criteria(password: str) -> Dict[str, bool]:
    return {
        "length": len(password) >= PASSWORD_MIN_LENGTH,
        "uppercase": any(c.isascii() and c.isupper() for c in password),
        "lowercase": any(c.isascii() and c.islower() for c in password),
        "number": any(c.isascii() and c.isdigit() for c in password),
        "symbol": any(c in PASSWORD_SYMBOLS for c in password),
    }


def calculate_password_strength(password: Optional[str]) -> PasswordStrength:
    """
    Classify a password as weak, medium or strong.

    Up to one criterion met is weak, two or three medium, four or five strong.
    """
    if not password:
        return PasswordStrength("none", 0, "")

    criteria = check_password_criteria(password)
    met = sum(criteria.values())
    if met <= 1:
        return PasswordStrength("weak", 1, "Weak", criteria)
    if met <= 3:
        return PasswordStrength("medium", 2, "Medium", criteria)
    return PasswordStrength("strong", 3, "Strong", criteria)


def validate_new_password(password: Optional[str], confirm: Optional[str]) -> ValidationResult:
    """Check a new password against its confirmation and the minimum length."""
    if (password or "") != (confirm or ""):
        return ValidationResult(False, "Passwords do not match.")
    if len(password or "") < PASSWORD_MIN_LENGTH:
        return ValidationResult(
            False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters long."
        )
    return ValidationResult(True)
