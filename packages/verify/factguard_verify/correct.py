from typing import List, Optional

from factguard_core import config
from factguard_core.errors import TextGenerationError

PROMPT = """# ROLE: Professional editor, correction mode

The previous summary of this article was REJECTED by the fact-checking system. Write a NEW summary.

# DETECTED ERRORS TO FIX:
{errors}

# FABRICATED CLAIMS (REMOVE ENTIRELY, DO NOT RESTATE IN ANY FORM):
{fabricated}

# CORRECTION INSTRUCTIONS:
1. READ the original text below carefully.
2. IGNORE the previous summary and start from scratch.
3. COPY verbatim every name, date, number and proper noun.
4. DO NOT add any information that is not in the original text.
5. DO NOT interpret, only REPORT the facts.
6. Keep the format: 3-10 sentences, **bold** for key information.

# ORIGINAL TEXT (THE ONLY SOURCE OF TRUTH):
{content}

# TITLE:
{title}

# CATEGORY:
{category}

NEW, CORRECTED SUMMARY:"""


def _numbered(items: List[str], empty: str) -> str:
    if not items:
        return empty
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))


def build_prompt(title: str, source_content: str, category: Optional[str],
                 errors: List[str], fabricated_claims: List[str]) -> str:
    return PROMPT.format(
        errors=_numbered(errors, "None reported"),
        fabricated=_numbered(fabricated_claims, "None identified"),
        content=(source_content or "")[:config.SUMMARY_SOURCE_CHARS],
        title=title,
        category=category or "news",
    )


def generate_corrected_summary(llm, title: str, source_content: str, category: Optional[str],
                               errors: List[str], fabricated_claims: List[str]) -> str:
    """Fresh candidate written against the source, steering away from the prior verdict's findings."""
    text = llm.generate(build_prompt(title, source_content, category, errors, fabricated_claims),
                        max_tokens=config.SUMMARY_MAX_TOKENS, temperature=0)
    text = (text or "").strip()
    if not text:
        raise TextGenerationError("Failed to generate corrected summary: empty completion")
    return text
