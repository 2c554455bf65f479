"""
Prompts sent to Perplexity for the `search` tool.
"""

from __future__ import annotations

from typing import Optional


SYSTEM_PROMPT: str = (
    "You are an expert software developer focused on debugging and solving coding problems. "
    "Always structure your responses exactly as requested."
)

RESPONSE_TEMPLATE: str = """1. Root Cause Analysis
----------------
• Technical Cause: [Explain the fundamental technical reason for the error]
• Common Scenarios: [List typical situations where this error occurs]
• Technical Background: [Provide relevant language/framework context]

2. Step-by-Step Solution
----------------
• Step 1: [First step with clear explanation]
  [Code snippet if applicable]
• Step 2: [Second step with clear explanation]
  [Code snippet if applicable]
• Step 3: [Third step with clear explanation]
  [Code snippet if applicable]
• Step 4: [Final verification step]
  [Working code demonstration]

3. Best Practices for Prevention
----------------
• Design Pattern: [Recommended pattern to prevent this issue]
• Code Organization: [How to structure code to avoid this]
• Common Pitfalls: [Specific mistakes to watch for]
• Error Handling: [How to properly handle edge cases]

4. Code Examples
----------------
Before:
```python
[Code that causes the error]
```

After:
```python
[Fixed version of the code]
```

Alternative Approaches:
```python
[Other valid solutions]
```"""


def code_block(code: Optional[str], language: str) -> str:
    """Return the fenced snippet embedded in the prompt, or an empty string."""

    if not code:
        return ""
    return f"\nCode to analyze:\n```{language}\n{code}\n```\n"


def search_prompt(*, query: str, code: Optional[str], language: str) -> str:
    """Return the user prompt asking for the fixed four-section answer."""

    return (
        "As an expert software developer, analyze this coding question and provide a comprehensive solution.\n"
        "\n"
        "CRITICAL FORMATTING INSTRUCTIONS:\n"
        "1. Use the EXACT section headers and bullet points provided\n"
        "2. Keep all bullet points and section markers exactly as shown\n"
        "3. Replace only the text in [brackets] with your analysis\n"
        "4. Do not add any additional sections or bullet points\n"
        "5. Do not modify the formatting or structure in any way\n"
        "6. Start each section with the exact numbered header and dashed line shown\n"
        "\n"
        "QUERY TO ANALYZE:\n"
        f"{query}\n"
        f"{code_block(code, language)}\n"
        "\n"
        f"{RESPONSE_TEMPLATE}"
    )
