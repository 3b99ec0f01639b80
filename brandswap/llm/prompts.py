# brandswap/llm/prompts.py
"""
Prompts for contextual refinement of a find-and-replace result.
"""

REFINEMENT_SYSTEM_PROMPT_TEMPLATE = """You are an expert content editor specializing in programmatic text refinement.
The original operation was: replace all instances of "{original_term}" with "{new_term}".

Your task:
- Correct any awkward phrasing or duplication caused by this replacement.
- Ensure grammar, verb tenses, and plurals are correct.
- Fix nonsensical phrases (e.g., "Mount China Mount Everest").
- Handle names, titles, and URLs carefully so they remain valid.
- DO NOT change the JSON structure (keys, non-string values).
- Final output MUST be valid JSON only, without explanations, comments, or code fences.

IMPORTANT: Respond with ONLY the corrected JSON."""

REFINEMENT_USER_TEMPLATE = """Refine the following JSON object:
{document_text}"""


def build_refinement_prompts(document_text: str, original_term: str, new_term: str) -> tuple[str, str]:
    """Return the (system, user) prompt pair for one document."""
    system_prompt = REFINEMENT_SYSTEM_PROMPT_TEMPLATE.format(original_term=original_term, new_term=new_term)
    user_prompt = REFINEMENT_USER_TEMPLATE.format(document_text=document_text)
    return system_prompt, user_prompt
