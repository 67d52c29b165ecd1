"""
Declarative form validation

A rule set maps each field name to an ordered list of rules. validate()
checks every field and reports the first rule each field breaks, in
declaration order.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Pattern as RegexPattern, Sequence, Union


@dataclass(frozen=True)
class FieldError:
    """A violated rule: which field, why, and what was sent"""
    field: str
    message: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


@dataclass(frozen=True)
class Required:
    message: str


@dataclass(frozen=True)
class LengthRange:
    min: int
    max: int
    message: str


@dataclass(frozen=True)
class Pattern:
    regex: RegexPattern
    message: str


@dataclass(frozen=True)
class OneOf:
    values: Sequence[str]
    message: str


Rule = Union[Required, LengthRange, Pattern, OneOf]
RuleSet = Mapping[str, Sequence[Rule]]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _check(rule: Rule, value: Any) -> bool:
    """True when value satisfies rule"""
    if isinstance(rule, Required):
        return not _is_blank(value)
    if isinstance(rule, LengthRange):
        return rule.min <= len(value) <= rule.max
    if isinstance(rule, Pattern):
        return rule.regex.fullmatch(value) is not None
    if isinstance(rule, OneOf):
        return value in rule.values
    raise TypeError(f"Unknown validation rule: {rule!r}")


def validate(data: Mapping[str, Any], rules: RuleSet) -> List[FieldError]:
    """
    Check data against rules

    Args:
        data: Raw field values; strings are trimmed before checking and
            any other present value fails as not being text
        rules: Field name -> ordered rules

    Returns:
        List[FieldError]: Empty when everything passed
    """
    errors = []
    for field, field_rules in rules.items():
        value = data.get(field)
        if isinstance(value, str):
            value = value.strip()

        # Optional fields are only checked when present
        if _is_blank(value) and not any(isinstance(r, Required) for r in field_rules):
            continue

        if value is not None and not isinstance(value, str):
            errors.append(FieldError(field=field, message=f"{field} must be a string", value=data.get(field)))
            continue

        for rule in field_rules:
            if not _check(rule, value):
                errors.append(FieldError(field=field, message=rule.message, value=data.get(field)))
                break
    return errors


EMAIL_REGEX = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
CONSENT_VALUES = ("on", "true", "1", "yes")

CONTACT_RULES: RuleSet = {
    "fullName": [
        Required("Full name is required"),
        LengthRange(2, 255, "Full name must be between 2 and 255 characters"),
        Pattern(
            re.compile(r"[a-zA-Z\s\-.']+"),
            "Full name can only contain letters, spaces, hyphens, dots, and apostrophes"
        ),
    ],
    "email": [
        Required("Email is required"),
        Pattern(EMAIL_REGEX, "Please provide a valid email address"),
        LengthRange(3, 255, "Email must not exceed 255 characters"),
    ],
    "contact": [
        Required("Contact number is required"),
        Pattern(re.compile(r"\+?[1-9]\d{0,15}"), "Please provide a valid contact number (10-16 digits)"),
        LengthRange(10, 16, "Contact number must be between 10 and 16 digits"),
    ],
    "message": [
        Required("Message is required"),
        LengthRange(10, 2000, "Message must be between 10 and 2000 characters"),
    ],
}


def career_rules(positions: Sequence[str], experience: Sequence[str], qualifications: Sequence[str]) -> RuleSet:
    """Rule set for the career application form"""
    return {
        "fullName": [
            Required("Full name is required"),
            LengthRange(2, 100, "Full name must be between 2 and 100 characters"),
            Pattern(
                re.compile(r"[a-zA-Z\s.'-]+"),
                "Full name can only contain letters, spaces, dots, hyphens, and apostrophes"
            ),
        ],
        "email": [
            Required("Email is required"),
            Pattern(EMAIL_REGEX, "Please provide a valid email address"),
            LengthRange(3, 255, "Email must not exceed 255 characters"),
        ],
        "phone": [
            Required("Phone number is required"),
            LengthRange(10, 15, "Phone number must be between 10 and 15 digits"),
            Pattern(re.compile(r"\+?[\d\s\-()]+"), "Please provide a valid phone number"),
        ],
        "location": [
            Required("Current location is required"),
            LengthRange(2, 100, "Location must be between 2 and 100 characters"),
        ],
        "position": [
            Required("Position is required"),
            OneOf(tuple(positions), "Please select a valid position"),
        ],
        "experience": [
            Required("Experience is required"),
            OneOf(tuple(experience), "Please select a valid experience range"),
        ],
        "qualification": [
            Required("Qualification is required"),
            OneOf(tuple(qualifications), "Please select a valid qualification"),
        ],
        "coverLetter": [
            LengthRange(0, 2000, "Cover letter must not exceed 2000 characters"),
        ],
        "consent": [
            Required("You must agree to the terms and conditions"),
            OneOf(CONSENT_VALUES, "You must agree to the terms and conditions"),
        ],
    }
