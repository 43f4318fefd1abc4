from __future__ import annotations

from ..errors import NoDataError

_PROMPT_TEMPLATE = """You are an expert data analyst and storyteller working for an enterprise company. Analyze all the provided data sources and create a comprehensive, compelling narrative.

{context}

YOUR TASK:
1. Analyze ALL data sources thoroughly (web analytics, spreadsheets, and any uploaded documents)
2. Cross-reference insights across different data sources when possible
3. Write a compelling 3-4 paragraph executive narrative that tells the complete story. Use specific numbers and make it engaging for C-level executives.
4. Identify 3-7 key insights (specific, data-driven findings from all sources)
5. Provide 2-5 actionable recommendations based on the combined data
6. Suggest the best chart visualization to highlight key metrics

RESPOND IN THIS EXACT JSON FORMAT:
{{
  "story": "Your 3-4 paragraph executive narrative here. Include specific numbers and percentages. Reference data from all available sources...",
  "insights": [
    "Insight 1 with specific numbers from analytics or spreadsheet",
    "Insight 2 highlighting a trend or pattern",
    "Insight 3 cross-referencing multiple data sources"
  ],
  "recommendations": [
    "Strategic recommendation 1 with expected impact",
    "Tactical recommendation 2 for immediate action"
  ],
  "chartData": {{
    "labels": ["Label1", "Label2", "Label3", "Label4", "Label5"],
    "datasets": [
      {{
        "label": "Primary Metric",
        "data": [100, 200, 150, 300, 250]
      }}
    ]
  }}
}}

For chartData:
- If analytics data is available, visualize key metrics like users, sessions, page views
- If spreadsheet data is available, pick the most insightful numeric columns
- Use at most 10 labels for readability
- Include 1-2 relevant metrics as datasets, each with exactly one number per label

Return ONLY one valid JSON object. Do not wrap it in markdown code fences and do not add any explanation before or after it."""


def build_prompt(context: str) -> str:
    """Embed the merged context block in the fixed instruction template."""
    if not context or not context.strip():
        raise NoDataError()
    return _PROMPT_TEMPLATE.format(context=context)
