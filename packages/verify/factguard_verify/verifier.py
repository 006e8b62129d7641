"""
Audit of a candidate summary against its source.

The text-generation call is asked for a strict JSON verdict. Its output is
treated as untrusted: it is parsed as JSON (a Markdown code fence around it is
tolerated, nothing else is) and validated against `RawVerdict`. Anything that
does not pass becomes a rejection with status "pending", so an unreadable
verdict can never certify a summary.
"""
import json
import logging
from typing import List, Optional

from langchain_core.utils.json import parse_json_markdown
from pydantic import AliasChoices, BaseModel, Field, NonNegativeInt, StrictBool, StrictStr, ValidationError

from factguard_core import config
from factguard_core.models import MismatchDetail, Verdict

log = logging.getLogger(__name__)

DIGIT_CHANGE = "DIGIT_CHANGE"
NAME_CHANGE = "NAME_CHANGE"
HALLUCINATION = "HALLUCINATION"
CONTEXT_OMISSION = "CONTEXT_OMISSION"
MISMATCH_TYPES = (DIGIT_CHANGE, NAME_CHANGE, HALLUCINATION, CONTEXT_OMISSION)

PARSE_FAILURE_ERROR = "Verification parsing failed"
UNITEMIZED_REJECTION = "Summary rejected without itemized errors"

SYSTEM = """# ROLE: Quality-control module (zero fabrication)

You run a RIGOROUS AUDIT of CURRENT_SUMMARY against SOURCE_DATA. SOURCE_DATA is the only source of truth.

# RULES
1. DIGIT_CHANGE: extract EVERY date, amount, percentage, statistic and number from the summary and
   compare it CHARACTER BY CHARACTER with SOURCE_DATA. Any difference ("15 million" vs "15.5 million")
   rejects the summary.
2. NAME_CHANGE: every person, organisation and place must be named IDENTICALLY to SOURCE_DATA.
   Any spelling difference rejects the summary.
3. HALLUCINATION: every statement needs direct support in SOURCE_DATA. Context from general knowledge
   ("market leader" when the source never says so), speculation or conclusions the author did not draw
   reject the summary.
4. CONTEXT_OMISSION: a correct number stated without qualifying context that the source attaches to it
   (e.g. a percentage without its comparison baseline) rejects the summary.

# PROCEDURE
- For EACH sentence of CURRENT_SUMMARY find exact support in SOURCE_DATA.
- For EACH number, date and name compare character by character.
- Count the claims you checked, verified and rejected.
- is_valid is true ONLY when no error of any class was found.

# RESPONSE FORMAT (STRICT JSON, NOTHING ELSE):
{
  "is_valid": true | false,
  "status": "verified" | "rejected",
  "mismatch_details": [
    {
      "type": "DIGIT_CHANGE" | "NAME_CHANGE" | "HALLUCINATION" | "CONTEXT_OMISSION",
      "claim_in_summary": "exact text from the summary",
      "source_evidence": "exact quote from the source, or null if there is none",
      "explanation": "short explanation of the problem"
    }
  ],
  "claimsChecked": number,
  "claimsVerified": number,
  "claimsRejected": number,
  "fabricatedClaims": ["claims with no support in the source"],
  "errors": ["plain-text list of errors"]
}
"""


class RawMismatch(BaseModel):
    type: StrictStr
    claim_in_summary: StrictStr = Field(validation_alias=AliasChoices("claim_in_summary", "claimInSummary"))
    source_evidence: Optional[StrictStr] = Field(
        default=None, validation_alias=AliasChoices("source_evidence", "sourceEvidence"))
    explanation: StrictStr = ""


class RawVerdict(BaseModel):
    """Schema of the JSON the verifier prompt asks for. Both snake and camel keys are accepted."""

    is_valid: StrictBool = Field(validation_alias=AliasChoices("is_valid", "isValid"))
    status: Optional[StrictStr] = None
    errors: Optional[List[StrictStr]] = None
    mismatch_details: Optional[List[RawMismatch]] = Field(
        default=None, validation_alias=AliasChoices("mismatch_details", "mismatchDetails"))
    claims_checked: Optional[NonNegativeInt] = Field(
        default=None, validation_alias=AliasChoices("claimsChecked", "claims_checked"))
    claims_verified: Optional[NonNegativeInt] = Field(
        default=None, validation_alias=AliasChoices("claimsVerified", "claims_verified"))
    claims_rejected: Optional[NonNegativeInt] = Field(
        default=None, validation_alias=AliasChoices("claimsRejected", "claims_rejected"))
    fabricated_claims: Optional[List[StrictStr]] = Field(
        default=None, validation_alias=AliasChoices("fabricatedClaims", "fabricated_claims"))


def parse_failure() -> Verdict:
    return Verdict(
        is_valid=False,
        status="pending",
        errors=[PARSE_FAILURE_ERROR],
        claims_checked=0,
        claims_verified=0,
        claims_rejected=0,
        fabricated_claims=[],
    )


def _format_error(d: MismatchDetail) -> str:
    return f"[{d.type}] {d.claim_in_summary} - {d.explanation}"


def normalize(raw: RawVerdict) -> Verdict:
    details = [
        MismatchDetail(
            type=m.type.strip().upper(),
            claim_in_summary=m.claim_in_summary,
            source_evidence=m.source_evidence,
            explanation=m.explanation,
        )
        for m in (raw.mismatch_details or [])
    ]
    errors = [e for e in raw.errors if e.strip()] if raw.errors is not None else [_format_error(d) for d in details]

    if raw.fabricated_claims is not None:
        fabricated = list(raw.fabricated_claims)
    else:
        fabricated = [d.claim_in_summary for d in details if d.type == HALLUCINATION]

    # any reported error vetoes a "valid" flag
    is_valid = raw.is_valid and raw.status == "verified" and not errors and not details
    if not is_valid and not errors:
        errors = [UNITEMIZED_REJECTION]

    return Verdict(
        is_valid=is_valid,
        status="verified" if is_valid else "rejected",
        errors=[] if is_valid else errors,
        mismatch_details=details or None,
        claims_checked=raw.claims_checked or 0,
        claims_verified=raw.claims_verified or 0,
        claims_rejected=raw.claims_rejected or 0,
        fabricated_claims=fabricated,
    )


def _is_bare_or_fenced(text: str) -> bool:
    return ((text.startswith("{") and text.endswith("}"))
            or (text.startswith("```") and text.endswith("```")))


def parse_verdict(text: str) -> Verdict:
    """Strict parse-or-default. Never raises."""
    stripped = (text or "").strip()
    if not _is_bare_or_fenced(stripped):
        log.warning("verdict is not bare or fenced JSON: %.200r", text)
        return parse_failure()
    try:
        obj = parse_json_markdown(stripped, parser=json.loads)
        raw = RawVerdict.model_validate(obj)
    except (ValueError, TypeError, ValidationError) as e:
        log.warning("unparsable verdict (%s): %.200r", type(e).__name__, text)
        return parse_failure()
    return normalize(raw)


def build_prompt(title: str, source_content: str, summary: str, attempt_number: int) -> str:
    return (
        SYSTEM
        + "\n---\n\nARTICLE TITLE:\n" + title
        + "\n\nSOURCE_DATA (THE ONLY SOURCE OF TRUTH):\n" + (source_content or "")[:config.VERIFY_SOURCE_CHARS]
        + f"\n\n---\n\nCURRENT_SUMMARY TO AUDIT (attempt {attempt_number}):\n" + summary
        + "\n\n---\n\nAUDIT RESULT (JSON only, no other text):"
    )


def verify_summary(llm, title: str, source_content: str, summary: str, attempt_number: int = 1) -> Verdict:
    text = llm.generate(build_prompt(title, source_content, summary, attempt_number),
                        max_tokens=config.VERIFY_MAX_TOKENS, temperature=0)
    verdict = parse_verdict(text)
    log.info("attempt %d verdict: %s (%d errors, %d/%d claims verified)", attempt_number,
             verdict.status, len(verdict.errors), verdict.claims_verified, verdict.claims_checked)
    return verdict
