import logging
from typing import Optional

from factguard_core import config
from factguard_core.errors import TextGenerationError

log = logging.getLogger(__name__)

PROMPT = """# ROLE
You are a senior news editor at a leading news portal. You write objective, concrete,
professional TL;DR summaries.

# CONSTRUCTION RULES
1. LEAD: the first sentence carries the core of the event (who, what, where, when).
2. CONTEXT AND CONSEQUENCES: explain causes or likely consequences only as far as the text states them.
3. PRECISION: never drop key numbers, dates, proper nouns or names. COPY THEM EXACTLY FROM THE SOURCE,
   do not round or paraphrase them.
4. STYLE: plain informative register, present or past tense.
5. FORBIDDEN:
   - meta phrases such as "The article describes", "The text says", "The author mentions";
   - opinions, commentary or evaluative adjectives ("shocking", "incredible");
   - ANY information that is NOT in the source text;
   - interpretation: REPORT the facts, do not infer;
   - bullet lists: the summary is continuous prose.

# FORMAT
- Length: 3-10 dense sentences depending on the complexity of the topic.
- Use bold (**text**) for key actors, names, dates and figures.

# TASK
Summarize the article below.

CATEGORY: {category}

TITLE: {title}

ARTICLE TEXT:
{content}

SUMMARY:"""


def build_prompt(title: str, source_content: str, category: Optional[str]) -> str:
    return PROMPT.format(
        category=category or "news",
        title=title,
        content=(source_content or "")[:config.SUMMARY_SOURCE_CHARS],
    )


def generate_summary(llm, title: str, source_content: str, category: Optional[str] = None) -> str:
    """First candidate summary for a document. Touches no persisted state."""
    text = llm.generate(build_prompt(title, source_content, category),
                        max_tokens=config.SUMMARY_MAX_TOKENS, temperature=0)
    text = (text or "").strip()
    if not text:
        raise TextGenerationError("Failed to generate summary: empty completion")
    log.debug("generated summary (%d chars) for %r", len(text), title[:50])
    return text
