JSON_ONLY = "Return ONLY valid JSON (no markdown fences, no explanation):"

HTML_RULES = """RULES:
- All inline styles. No <style> tags, no classes, no external stylesheets.
- Use {{token_name}} placeholders for ALL visible text content, with descriptive snake_case names.
- No <img> tags except for provided asset URLs; every <img> must include crossorigin="anonymous".
- Use colored shapes as product placeholders when no asset is provided.
- Headline font for headlines, body font for everything else."""

COPY_GUIDELINES = """COPY QUALITY (follow these):
- Headlines: punchy, max 8 words. Lead with taste or experience, follow with nutrition.
- Subheadlines: supporting detail, max 15 words.
- Body copy: brief, max 25 words. Focus on one key benefit.
- CTAs: 2-4 words, action-oriented, high urgency.
- Tone: warm, upbeat, approachable, like a trusted friend who's excited about breakfast.
- Use brand colors only when specifying color modifications."""

EDIT_RULES = """RULES:
1. Only change what the user asked for.
2. Keep all inline styles. No <style> tags or classes.
3. The ad must remain EXACTLY {width}px wide and {height}px tall.
4. Use {{{{token_name}}}} placeholders for ALL text content.
5. When adding/changing colors, prefer brand colors.
6. Preserve all existing layout structure unless the user explicitly asked to change it.
7. Any <img> tags must include crossorigin="anonymous"."""

TOKENIZE_RULES = """RULES:
- Replace every piece of text a viewer would see with a {{token_name}} placeholder.
- Token names are descriptive snake_case (headline, subheadline, cta, badge_text, ...).
- Put the original literal text of each token in "fields", unchanged.
- Keep every tag, attribute, inline style, and image/resource URL byte-for-byte identical.
- Do not add, remove, or reorder any element."""

REVIEW_DIMENSIONS = {
    "hook": "Does it stop the scroll? Is there one strong visual or verbal hook?",
    "quality": "Is the design polished: alignment, spacing, hierarchy, consistent fonts and brand colors?",
    "readability": "Is every piece of text legible at mobile size with enough contrast?",
    "clarity": "Is there ONE clear message and an obvious call to action?",
    "layout": "Does the composition match the reference layout and fill the canvas without overflow or clipping?",
}

PERFORMANCE_CHECKLIST = """Analyze this ad from a PAID PERFORMANCE perspective. Think about:
- Does it stop the scroll? (visual hook)
- Is there ONE clear message? (not 5 competing messages)
- Is the CTA strong and clear?
- Would this convert on Meta/Instagram?
- Is the text readable at mobile size?
- Is there social proof or urgency?
- Does it follow the 20% text rule for Meta?

Be honest and specific. Give real, actionable feedback that would improve ROAS."""

PERFORMANCE_REVIEW_SHAPE = """{
  "score": <number 1-10>,
  "verdict": "<one blunt sentence>",
  "strengths": ["<specific strength 1>", "<specific strength 2>"],
  "improvements": [
    {"issue": "<what's wrong>", "fix": "<exactly what to change>", "priority": "high" | "medium" | "low"}
  ],
  "hookScore": <1-10>,
  "ctaScore": <1-10>,
  "clarityScore": <1-10>,
  "visualScore": <1-10>,
  "tips": ["<platform-specific tip>", "<tip 2>"]
}"""

TEMPLATE_SELECTION_INSTRUCTIONS = """INSTRUCTIONS:
1. Pick the template whose layout best matches the brief.
2. For each editable text field, write punchy on-brand copy. Lead with taste/experience, then nutrition.
3. For color fields, use brand colors only.
4. For image fields, leave as null unless the brief includes specific image URLs.
5. Keep headlines short (max 8 words). CTAs should be 2-4 words."""

TEMPLATE_SELECTION_SHAPE = """{
  "templateId": "the id of your chosen template",
  "templateName": "name of the template",
  "modifications": {
    "FieldName": "value for each editable field"
  },
  "reasoning": "1 sentence explaining why you chose this template"
}"""

COPY_SHAPE = """{
  "variations": [
    {
      "headline": "short punchy headline (max 8 words)",
      "subheadline": "supporting line (max 15 words)",
      "body": "brief body copy if needed (max 25 words, or empty string)",
      "cta": "call to action (2-4 words)"
    }
  ]
}"""

ANALYZE_REFERENCE_PROMPT = """You are an expert graphic designer analyzing a reference advertisement image. Analyze the layout, composition, and design elements to help recreate a similar ad for a different brand.

Analyze this ad and return a JSON response with EXACTLY this structure (no markdown, just raw JSON):

{
  "layout": {
    "structure": "one of: hero-product, lifestyle-overlay, split-layout, bold-typography, grid, collage",
    "description": "brief description of the overall layout"
  },
  "textHierarchy": [
    {
      "role": "headline | subheadline | body | cta | tagline",
      "position": "top-left | top-center | top-right | center | bottom-left | bottom-center | bottom-right",
      "style": "bold | regular | italic | uppercase",
      "approximateText": "what the text roughly says"
    }
  ],
  "colorPalette": ["#hex1", "#hex2", "#hex3", "#hex4"],
  "styleNotes": "2-3 sentences describing the visual style, mood, and feel",
  "suggestedTemplate": "one of: hero-product, lifestyle-overlay, split-layout, bold-typography",
  "designElements": ["list of notable design elements like: gradient, border, badge, pattern, shadow, rounded-corners"]
}

Return ONLY valid JSON, no explanation or markdown."""
