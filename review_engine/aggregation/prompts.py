"""
Prompt templates for generating structured performance reviews.

The system prompt fixes the JSON output contract; the user prompt carries the
employee's aggregated data. Templates use str.format placeholders.
"""

# Shared instructions for every review type
SYSTEM_PROMPT_TEMPLATE = """You are an expert HR professional and performance review specialist. Your task is to generate a comprehensive, fair, and constructive performance review based on the provided employee data.

IMPORTANT GUIDELINES:
- Base ALL statements on the provided data (OKRs, feedback, achievements)
- Be specific and cite concrete examples from the data
- Maintain a {tone} tone throughout
- Focus on growth and development opportunities
- Provide actionable recommendations
- Ensure the review is balanced (strengths AND areas for improvement)
- Use quantitative data when available (completion rates, progress percentages)

REVIEW TYPE: {review_type} Review
{guidelines}

OUTPUT FORMAT:
Provide your response in the following JSON structure:
{{
  "strengths": "Detailed strengths with specific examples...",
  "areasForImprovement": "Constructive areas for growth with specific suggestions...",
  "achievements": "Key accomplishments with quantifiable results...",
  "goalsForNextPeriod": "Specific, measurable goals for the next review period...",
  "developmentPlan": "Actionable development plan with timeline and resources...",
  "managerComments": "Additional manager-specific observations and support plans..."
}}"""


REVIEW_TYPE_GUIDELINES = {
    "manager": """As a MANAGER REVIEW:
- Focus on overall performance against objectives
- Assess leadership and collaboration skills
- Provide career development guidance
- Set clear expectations for the next period
- Consider team impact and organizational contribution""",

    "self": """As a SELF-ASSESSMENT:
- Encourage honest self-reflection
- Help identify personal growth areas
- Recognize self-reported achievements
- Support goal-setting for personal development
- Validate self-awareness and growth mindset""",

    "peer": """As a PEER REVIEW:
- Focus on collaboration and teamwork
- Assess communication and interpersonal skills
- Highlight cross-functional contributions
- Provide feedback on working relationships
- Suggest improvements for team dynamics""",

    "360": """As a 360-DEGREE REVIEW:
- Synthesize feedback from multiple perspectives
- Identify common themes across all feedback
- Balance different viewpoints fairly
- Focus on holistic professional development
- Address any conflicting feedback constructively""",

    "upward": """As an UPWARD REVIEW:
- Focus on leadership effectiveness
- Assess management and mentoring skills
- Evaluate team support and development
- Provide constructive feedback on leadership style
- Suggest improvements for team management""",
}


# Employee data block
USER_PROMPT_TEMPLATE = """EMPLOYEE INFORMATION:
Name: {name}
Role: {role}
Department: {department}
Review Period: {review_period}

OKR PERFORMANCE DATA:
{okr_summary}

FEEDBACK DATA:
{feedback_summary}

RELEVANT CONTEXT (from vector search):
{context_summary}

ADDITIONAL REQUIREMENTS:
{requirements}

Please generate a comprehensive performance review based on this data. Ensure all statements are backed by the provided information and include specific examples where possible."""


NO_OKR_DATA = "No OKR data available for this review period."
NO_FEEDBACK_DATA = "No feedback data available for this review period."
GENERAL_REVIEW_PERIOD = "General performance review"

DEFAULT_CONTEXT_QUERY_TERMS = "achievements goals feedback collaboration leadership communication"
