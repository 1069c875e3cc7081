"""
Human-readable reports for permission validation results.

Blocking reports explain which operations cannot run and how to fix the
token; the remediation copy depends on whether the token is a classic PAT
(scopes) or a fine-grained token (per-category permissions). Warning reports
are advisory only.
"""

from __future__ import annotations

from typing import Sequence

from access_control.permissions import PermissionCategory
from access_control.probe import CredentialFamily
from access_control.validator import ValidationVerdict

CLASSIC_TOKEN_SETTINGS_URL: str = "https://github.com/settings/tokens"
FINE_GRAINED_TOKEN_SETTINGS_URL: str = "https://github.com/settings/personal-access-tokens/new"
CLASSIC_TOKEN_DOCS_URL: str = (
    "https://docs.github.com/en/authentication/keeping-your-account-and-data-secure/"
    "managing-your-personal-access-tokens"
)
FINE_GRAINED_TOKEN_DOCS_URL: str = (
    "https://docs.github.com/en/authentication/keeping-your-account-and-data-secure/"
    "creating-a-personal-access-token"
)

# Classic scope that grants write access to each category
CATEGORY_TO_SCOPE: dict[PermissionCategory, str] = {
    PermissionCategory.ISSUES: "repo (full repository access)",
    PermissionCategory.PULL_REQUESTS: "repo (full repository access)",
    PermissionCategory.DISCUSSIONS: "write:discussion",
    PermissionCategory.PROJECTS: "project",
    PermissionCategory.CONTENTS: "repo",
}


def _format_list(facts: Sequence[object]) -> str:
    return ", ".join(str(f) for f in facts)


def _classic_remediation(failed: Sequence[ValidationVerdict]) -> list[str]:
    lines = [
        "For Classic Personal Access Tokens:",
        f"1. Go to {CLASSIC_TOKEN_SETTINGS_URL}",
        "2. Edit your token or create a new one",
        "3. Enable the following scopes:",
    ]
    # dict keeps first-seen order while deduplicating
    scopes: dict[str, None] = {}
    for verdict in failed:
        for fact in verdict.missing:
            scope = CATEGORY_TO_SCOPE.get(fact.category)
            if scope:
                scopes[scope] = None
    lines.extend(f"   - {scope}" for scope in scopes)
    return lines


def _fine_grained_remediation(failed: Sequence[ValidationVerdict]) -> list[str]:
    lines = [
        "For Fine-Grained Personal Access Tokens:",
        f"1. Go to {FINE_GRAINED_TOKEN_SETTINGS_URL}",
        "2. Select the target repository",
        "3. Grant the following permissions:",
    ]
    categories: dict[PermissionCategory, None] = {}
    for verdict in failed:
        for fact in verdict.missing:
            categories[fact.category] = None
    lines.extend(f"   - {category.value.capitalize()}: Read and Write" for category in categories)
    return lines


def render_blocking(
    verdicts: Sequence[ValidationVerdict],
    family: CredentialFamily | str,
) -> str:
    """Error report for operations the token cannot perform ("" if none)."""
    failed = [v for v in verdicts if not v.valid]
    if not failed:
        return ""

    lines = [
        "❌ Token Missing Required Permissions",
        "",
        "The GitHub token lacks permissions required for the following operations:",
        "",
    ]
    for verdict in failed:
        lines.append(f"• {verdict.description} ({verdict.operation_kind})")
        lines.append(f"  Missing: {_format_list(verdict.missing)}")
        if verdict.optional_gaps:
            lines.append(f"  Optional (degraded functionality): {_format_list(verdict.optional_gaps)}")

    lines.extend(["", "📋 Remediation Steps:", ""])
    if CredentialFamily(family) == CredentialFamily.LEGACY_SCOPE:
        lines.extend(_classic_remediation(failed))
    else:
        lines.extend(_fine_grained_remediation(failed))

    lines.extend([
        "",
        "4. Update your workflow secret with the new token",
        "",
        "📚 Documentation:",
        f"- Classic tokens: {CLASSIC_TOKEN_DOCS_URL}",
        f"- Fine-grained tokens: {FINE_GRAINED_TOKEN_DOCS_URL}",
    ])
    return "\n".join(lines)


def render_warning(verdicts: Sequence[ValidationVerdict]) -> str:
    """Advisory report for operations with missing optional permissions ("" if none)."""
    degraded = [v for v in verdicts if v.optional_gaps]
    if not degraded:
        return ""

    lines = [
        "⚠️  Optional Permissions Missing (Degraded Functionality)",
        "",
        "The following operations may have reduced functionality:",
        "",
    ]
    for verdict in degraded:
        lines.append(f"• {verdict.description} ({verdict.operation_kind})")
        lines.append(f"  Optional: {_format_list(verdict.optional_gaps)}")
    return "\n".join(lines)
