"""
Prompt templates for article generation and message extraction.
"""
from ...models import JobFields

EXTRACTION_FIELDS = (
    "title",
    "location",
    "requirements",
    "company",
    "salary",
    "applyLink",
    "applyEmail",
    "type",
    "interviewDate",
    "interviewTime",
    "interviewLocation",
)

ARTICLE_PROMPT = """
You are a professional SEO content writer and Web Designer. Create a high-quality, SEO-optimized job blog post with a STUNNING, PREMIUM design.

Job Details:
Job Title: {title}
Company: {company}
Location: {location}
Salary: {salary}
Job Type: {type}
Brief Requirements: {requirements}
Apply Link: {apply_link}
Apply Email: {apply_email}
Interview Details: {interview}

STRICT CONTENT STRUCTURE (SEO WINNING FORMULA):
1. Introduction (100-150 words): Engaging intro about the job and industry.
2. About Company (150-200 words): Detailed profile of the company.
3. Walk-in Interview Details (ONLY if Interview Details are provided): Create a high-visibility box with Company Name, Date, Time, and Venue.
4. Available Positions: List the main position and any related roles.
5. Job Requirements: Bulleted list of skills and qualifications.
6. Benefits: What the company offers (Salary, Insurance, etc.).
7. How to Apply: Clear instructions with the Apply Link/Email.
8. Important Notes: Key dates or specific instructions.
9. FAQ Section: 3-5 relevant questions and answers.
10. Conclusion: Final encouraging closing statement.

DESIGN & FORMATTING RULES:
1. Output ONLY the HTML code. NO markdown blocks.
2. USE INLINE CSS for all styling (Blogger friendly).
3. NO <html>, <head>, or <body> tags.
4. MOBILE-FRIENDLY: Use width: 100%, max-width: 850px, font-size: 16px.
5. AESTHETICS:
   - Header Card: Gradient background (#1a2c5b to #0984e3), rounded corners (15px), white text.
   - Interview Box: A bright accent box (light orange background #fff3e0 with a #e67e22 border) to make walk-in details stand out.
   - Sections: Use <h2> with a bottom border or accent color.
   - Badges: Stylized tags for 'Location', 'Salary', 'Type'.
   - Buttons: Large, clickable styled buttons for Applying.
"""

EXTRACTION_PROMPT = """
Extract job details from this message into a JSON object.
Fields: {fields}.
If a field is missing, use null.

Message: "{message}"

Output ONLY the JSON object.
"""


def build_article_prompt(job: JobFields) -> str:
    if job.has_interview:
        interview = (
            f"Company: {job.company}, Date: {job.interview_date}, "
            f"Time: {job.interview_time or 'TBA'}, Location: {job.interview_location or 'TBA'}"
        )
    else:
        interview = "None"
    return ARTICLE_PROMPT.format(
        title=job.title,
        company=job.company,
        location=job.location,
        salary=job.salary,
        type=job.type,
        requirements=job.requirements,
        apply_link=job.apply_link or "",
        apply_email=job.apply_email or "",
        interview=interview,
    )


def build_extraction_prompt(message: str) -> str:
    return EXTRACTION_PROMPT.format(fields=", ".join(EXTRACTION_FIELDS), message=message)
