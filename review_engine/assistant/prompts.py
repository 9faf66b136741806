"""
Prompt templates for the assistant features: quick reviews, summaries,
feedback suggestions, content validation and sentiment analysis.
"""

REVIEW_TYPE_PROMPTS = {
    "self": "Generate a comprehensive self-assessment review based on the employee's performance data.",
    "peer": "Generate a balanced peer review highlighting strengths and areas for growth based on the available data.",
    "manager": "Generate a detailed manager review with specific examples, accomplishments, and development areas.",
}

REVIEW_TEMPLATE = """{base_prompt}

Include specific examples from the context provided. Focus on:
1. Key achievements and contributions
2. Areas of strength with supporting evidence
3. Growth opportunities with actionable suggestions
4. Overall performance assessment

Make sure all claims are supported by the context provided."""


SELF_ASSESSMENT_SUMMARY_TEMPLATE = """Summarize the following self-assessment, highlighting key achievements, challenges faced, and areas for growth. Maintain the employee's voice and perspective.

Self-assessment: {content}"""


FEEDBACK_SUGGESTION_TEMPLATE = """Suggest constructive feedback for {name} based on their recent work.
Include specific strengths, areas for improvement, and actionable suggestions.

Recent work: {recent_work}
Additional context: {context}"""


CONTENT_VALIDATION_TEMPLATE = """Validate if the following content is accurately supported by the provided sources.
Identify any claims that are not supported by the sources or any misrepresentations.

Content: {content}

Sources: {sources}

Respond with a JSON object containing:
1. isValid: boolean - true if content is valid, false otherwise
2. issues: string[] - array of issues found, empty if none"""


FEEDBACK_ANALYSIS_TEMPLATE = """Analyze the following feedback text for tone, quality, specificity, and actionability.
Return a JSON object with the following properties:

- tone: One of "positive", "neutral", "constructive", or "negative"
- quality: A score from 0-100 indicating overall feedback quality
- specificity: A score from 0-100 indicating how specific the feedback is
- actionability: A score from 0-100 indicating how actionable the feedback is
- biasIndicators: An array of strings indicating potential bias in the feedback
- keywords: An array of key terms/themes from the feedback
- summary: A one-sentence summary of the feedback

Feedback text:
"{content}\""""


BIAS_DETECTION_TEMPLATE = """Analyze the following feedback text for potential bias.
Look for gender bias, racial bias, age bias, favoritism, recency bias, or any other forms of bias.
Return a JSON array of strings describing any bias detected, or an empty array if none is found.

Feedback text:
"{content}\""""


FEEDBACK_IMPROVEMENT_TEMPLATE = """Analyze the following feedback text and suggest improvements to make it more specific, actionable, and balanced.
Return a JSON object with the following properties:

- improved: The improved feedback text
- changes: An array of strings describing the changes made

Feedback text:
"{content}\""""
