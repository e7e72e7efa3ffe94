"""
LLM prompts for document inspection.

All prompts sent to the document oracle are centralised here.
This makes it easy to iterate on prompts without touching client logic.
"""

from __future__ import annotations


# ═══════════════════════════════════════════════════════════
#  System Prompt: the three checks + response contract
# ═══════════════════════════════════════════════════════════

SYSTEM_PROMPT_TEMPLATE = """You are a document validation assistant. Analyze the provided {document_kind} and check:
1. If the name "{expected_name}" appears in the document (check for variations, initials, etc.)
2. If the expiry date "{expected_expiry}" matches or is close to the expiry date in the document
3. If the document appears to be a valid {document_kind}

Respond with a JSON object: {{"isValid": true/false, "reason": "explanation"}}
If the name doesn't match or expiry date doesn't match, set isValid to false and provide a clear reason."""


# ═══════════════════════════════════════════════════════════
#  User Prompt: restates the expectations next to the document
# ═══════════════════════════════════════════════════════════

USER_PROMPT_TEMPLATE = (
    'Please validate this {document_kind}. '
    'Expected name: "{expected_name}", Expected expiry: "{expected_expiry}"'
)


def build_system_prompt(document_kind: str, expected_name: str, expected_expiry: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        document_kind=document_kind,
        expected_name=expected_name,
        expected_expiry=expected_expiry,
    )


def build_user_prompt(document_kind: str, expected_name: str, expected_expiry: str) -> str:
    return USER_PROMPT_TEMPLATE.format(
        document_kind=document_kind,
        expected_name=expected_name,
        expected_expiry=expected_expiry,
    )
