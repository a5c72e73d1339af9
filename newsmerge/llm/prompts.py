"""Prompt templates for the language-model capabilities.

Templates are filled with ``str.format``; literal braces in the JSON
examples are doubled.
"""

CATEGORIES_HELP = """\
- politics (government, elections, diplomacy, institutions)
- economy (business, finance, jobs, budget, companies)
- society (daily life, local news, social issues, justice)
- sport (competitions, football, athletes)
- culture (music, film, arts, heritage)
- health (medicine, hospitals, epidemics, public health)
- education (schools, universities, training, research)
- technology (innovation, digital, telecoms)
- international (foreign relations, regional bodies, diaspora)
- environment (ecology, climate, natural resources)"""


CATEGORIZATION_PROMPT = """You classify news articles from Gabon and Central Africa.

Article:
---
Title: {title}
Content: {content}
Source: {source}
---

Assign ONE main category and up to 2 secondary categories.

Available categories:
{categories}

Reply with strict JSON, no markdown:
{{
  "mainCategory": "category_name",
  "secondaryCategories": ["category1", "category2"],
  "confidence": 0.95,
  "reasoning": "One sentence explanation"
}}"""


ENTITY_EXTRACTION_PROMPT = """You extract named entities from news articles about Gabon.

Article:
---
{content}
---

Extract every important person, organization, location and keyword.

Reply with strict JSON, no markdown:
{{
  "people": [{{"name": "Full Name", "title": "Role"}}],
  "organizations": [{{"name": "Organization", "type": "institution"}}],
  "locations": [{{"name": "Libreville", "type": "city"}}],
  "keywords": ["keyword1", "keyword2"]
}}"""


REWRITE_PROMPT = """You are an explanatory journalist rewriting news so that any reader can follow it.

Source article:
---
Original title: {title}
Content: {content}
Source: {source}
Category: {category}
---

Rewrite the article in three formats in the language of the original:
- short: 50-70 words, the essentials in 2-3 sentences
- medium: 180-220 words, who/what/when/where/why/how with context
- long: 450-550 words, lead, background, details and quotes, stakes, outlook

Also write an informative title of 8-12 words without sensationalism.
Stay factual and neutral, quote sources, keep exact figures, expand acronyms.

Reply with strict JSON, no markdown:
{{
  "optimizedTitle": "Informative title",
  "shortVersion": "...",
  "mediumVersion": "...",
  "longVersion": "...",
  "keyQuotes": [{{"text": "exact quote", "author": "Full Name", "role": "Role"}}],
  "suggestedTags": ["tag1", "tag2", "tag3"]
}}"""


DUPLICATE_DETECTION_PROMPT = """You detect duplicate news coverage.

New article:
---
Title: {title}
Summary: {summary}
Source: {source}
Date: {date}
---

Existing articles (last {lookback_hours}h):
---
{existing}
---

Decide whether the new article covers the SAME EVENT as one or more existing articles.
Consider the main subject, location, time period and overlapping key entities.

Similarity levels:
- 0.9-1.0 identical event, different sources
- 0.7-0.89 same event, different angle
- 0.5-0.69 related subjects, distinct events
- 0-0.49 different subjects

Recommendation:
- MERGE: same event, merge with the existing coverage
- UPDATE: same event with new information
- SEPARATE: different enough to keep apart
- SKIP: exact duplicate without added value

Reply with strict JSON, no markdown, using the numeric ids above:
{{
  "isDuplicate": true,
  "similarityScore": 0.85,
  "matchingArticleIds": [12, 15],
  "matchingSummary": "What matches",
  "recommendation": "MERGE",
  "confidence": 0.9
}}"""


EXISTING_ARTICLE_TEMPLATE = """[{id}] {title}
Summary: {summary}
Source: {source} | Date: {date}"""


SYNTHESIS_PROMPT = """You are a senior journalist combining several sources on the same event.

Sources, most reliable first:
---
{sources}
---

Write ONE synthesis article:
1. Lead with facts confirmed by several sources
2. Attribute facts found in a single source ("according to ...")
3. Flag every divergence or contradiction between sources
4. Never invent information; when figures differ, give both

Reply with strict JSON, no markdown:
{{
  "synthesizedTitle": "Informative title",
  "synthesizedShort": "About 60 words",
  "synthesizedMedium": "About 200 words",
  "synthesizedLong": "About 500 words",
  "sourcesAnalysis": [{{"source": "Name", "reliability": "high", "uniqueContribution": "..."}}],
  "factualConsensus": 0.85,
  "contradictions": [
    {{
      "topic": "Number of participants",
      "sources": [{{"name": "Source A", "value": "500"}}, {{"name": "Source B", "value": "800"}}],
      "resolution": "Report both estimates"
    }}
  ],
  "keyFacts": ["confirmed fact 1", "confirmed fact 2"],
  "confidence": 0.9
}}"""


SOURCE_BUNDLE_TEMPLATE = """### {source_name} (reliability: {reliability})
Title: {title}
Published: {published_at}
Content: {content}"""


BREAKING_NEWS_PROMPT = """You are an editor-in-chief rating the urgency of news.

Article:
---
Title: {title}
Content: {content}
Category: {category}
Published: {published_at}
---

Is this breaking news that needs an immediate push notification?
Breaking news includes deaths of prominent figures, government resignations or
appointments, disasters and serious accidents, major presidential announcements,
election results, national security events and high-impact economic decisions.

Urgency levels:
- CRITICAL: notify everyone immediately
- HIGH: notify interested subscribers quickly
- NORMAL: include in the digest, no push
- LOW: no special treatment

Reply with strict JSON, no markdown:
{{
  "isBreakingNews": false,
  "urgencyLevel": "NORMAL",
  "notificationTitle": "Short notification title",
  "notificationBody": "At most 100 characters",
  "targetAudience": "all",
  "reasoning": "Why",
  "confidence": 0.95
}}"""
