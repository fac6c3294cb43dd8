"""Criterion-keyed instructions sent to the oracle alongside each photo."""

from __future__ import annotations

from textwrap import dedent

from app.schemas import Criterion

_FRAMING = dedent(
    """\
    You are an expert dating profile consultant analyzing photos for maximum dating success.

    ANALYZE THIS PHOTO COMPREHENSIVELY:

    VISUAL QUALITY ASSESSMENT (0-100):
    - Technical quality: lighting conditions, composition rules, sharpness, color balance
    - Aesthetic appeal: visual harmony, professional appearance
    - Photo execution: looks intentional vs accidental, proper framing

    ATTRACTIVENESS FACTORS (0-100):
    - Facial features: expression authenticity, eye contact effectiveness
    - Body language: confident posture, approachability signals, relaxed vs tense
    - Styling choices: outfit appropriateness, grooming level, accessories

    DATING APPEAL ANALYSIS (0-100):
    - First impression impact: immediate attraction factor, memorable elements
    - Personality projection: what character traits are clearly communicated
    - Conversation potential: interesting elements that naturally invite questions
    - Swipe-worthiness: thumb-stopping power on dating apps

    CONTEXT & SETTING EVALUATION:
    - Location appropriateness for dating profiles
    - Activity/lifestyle signals being communicated
    - Social context (if others present), analyzed honestly
    - Props/background elements that add value or distract

    PSYCHOLOGICAL INSIGHTS:
    - Confidence indicators and how they're projected
    - Authenticity vs. performance assessment
    - Likely emotional response of viewers (trust, attraction, relatability)

    PROVIDE SPECIFIC, ACTIONABLE FEEDBACK:
    - What's working well (be specific and encouraging)
    - Improvements that enhance this photo within its current context
    - Technical fixes that would enhance photo quality
    """
)

_CRITERION_FOCUS: dict[Criterion, str] = {
    Criterion.BEST: (
        "OVERALL FOCUS: Focus on overall dating profile optimization, broad "
        "demographic appeal, and maximizing dating success potential."
    ),
    Criterion.SOCIAL: (
        "SOCIAL FOCUS: Emphasize social elements, group dynamics, and social "
        "context. Evaluate how well the photo demonstrates social connectivity."
    ),
    Criterion.ACTIVITY: (
        "ACTIVITY FOCUS: Focus on activities, hobbies, lifestyle demonstration, "
        "and skill showcase. Analyze what this reveals about interests and lifestyle."
    ),
    Criterion.PERSONALITY: (
        "PERSONALITY FOCUS: Deep dive into personality traits, character "
        "projection, and authenticity markers revealed in the photo."
    ),
    Criterion.BALANCED: (
        "BALANCED FOCUS: Provide detailed categorization scores for social, "
        "activity, and personality aspects. Be precise about categorization - "
        "it will be used to assemble a diverse, balanced profile."
    ),
    Criterion.PROFILE_ORDER: (
        "POSITIONING FOCUS: Analyze where this photo should be positioned in a "
        "dating profile (main photo vs supporting). Consider face clarity, "
        "immediate impact, and how it fits in a profile sequence."
    ),
    Criterion.CONVERSATION_STARTERS: (
        "CONVERSATION FOCUS: Identify specific elements that would give someone "
        "something to message about: conversation hooks, interesting background "
        "details, and discussion starters."
    ),
    Criterion.BROAD_APPEAL: (
        "APPEAL FOCUS: Evaluate appeal across different demographics. Analyze "
        "mass market appeal vs niche attraction."
    ),
    Criterion.AUTHENTICITY: (
        "AUTHENTICITY FOCUS: Assess how genuine and natural the person appears. "
        "Analyze posed vs candid feel and authentic expression."
    ),
}

_BASE_SCHEMA = dedent(
    """\
      "overallScore": (0-100),
      "visualQuality": (0-100),
      "attractivenessScore": (0-100),
      "datingAppealScore": (0-100),
      "swipeWorthiness": (0-100),
      "tags": [select applicable from: "social", "activity", "personality", "professional", "casual", "outdoor", "group", "travel", "hobby"],
      "categorization": {
        "socialScore": (0-100),
        "activityScore": (0-100),
        "personalityScore": (0-100),
        "primaryCategory": "social|activity|personality|general",
        "categoryConfidence": (0-100)
      },
      "strengths": ["specific positive element", "another strong aspect", "third strength"],
      "improvements": ["actionable improvement for THIS photo", "technical adjustment", "styling/positioning suggestion"],
      "technicalFeedback": {
        "lighting": "lighting assessment and suggestions",
        "composition": "framing analysis and improvements",
        "styling": "outfit, grooming, and accessory feedback"
      },
      "datingInsights": {
        "personalityProjected": ["confident", "fun", "adventurous"],
        "demographicAppeal": "who this photo appeals to most",
        "profileRole": "how this photo should be used in a dating profile"
      },
      "psychologicalInsights": {
        "confidence": ["confidence indicators visible in photo"],
        "authenticity": "natural vs posed assessment",
        "emotionalIntelligence": "EQ indicators shown through expression/body language",
        "marketPositioning": "how this positions the person in the dating market",
        "psychologicalImpact": "emotional response this photo likely evokes",
        "trustworthiness": "factors that build or reduce trust",
        "approachability": "elements that affect approachability"
      },
      "competitiveAnalysis": {
        "uniqueElements": ["what makes this photo stand out"],
        "marketAdvantages": ["competitive strengths in this photo"],
        "improvementPotential": ["small changes with big impact"]
      },
      "nextPhotoSuggestions": ["complementary photo type", "scenario that adds balance to the profile"]"""
)

_EXTENSION_SCHEMA: dict[Criterion, str] = {
    Criterion.PROFILE_ORDER: (
        '  "position": (1-12, recommended slot in the profile, 1 = main photo),\n'
        '  "positionReason": "why this slot suits the photo"'
    ),
    Criterion.CONVERSATION_STARTERS: (
        '  "conversationElements": ["specific visible details someone could ask about"],\n'
        '  "messageHooks": ["example opening messages inspired by the photo"]'
    ),
    Criterion.BROAD_APPEAL: (
        '  "appealBreadth": "broad|moderate|niche, with the audience it resonates with"'
    ),
    Criterion.AUTHENTICITY: (
        '  "authenticityLevel": "candid|natural|posed|staged, with a short justification"'
    ),
}

_CLOSING = dedent(
    """\
    CATEGORIZATION GUIDELINES:
    - Social: 2+ people visible, group activities, parties, social events
    - Activity: sports, hobbies, travel, adventures, skills, outdoor activities
    - Personality: close-ups with genuine expressions, candid or creative shots
    - General: solo photos that don't clearly fit other categories

    Respond with the JSON object only, no prose outside it.
    Be encouraging but honest."""
)


def build_analysis_prompt(criterion: Criterion | str | None) -> str:
    """Return the full instruction block for the given criterion.

    Unsupported criteria get the same prompt as ``best``.
    """
    resolved = Criterion.resolve(criterion)
    schema = _BASE_SCHEMA
    extension = _EXTENSION_SCHEMA.get(resolved)
    if extension:
        schema = f"{schema},\n{extension}"
    return "\n".join(
        [
            _FRAMING,
            _CRITERION_FOCUS[resolved],
            "",
            "RETURN COMPREHENSIVE JSON ANALYSIS:",
            "{",
            schema,
            "}",
            "",
            _CLOSING,
        ]
    )


_EXTENSION_FIELDS: dict[Criterion, tuple[str, ...]] = {
    Criterion.PROFILE_ORDER: ("position", "positionReason"),
    Criterion.CONVERSATION_STARTERS: ("conversationElements", "messageHooks"),
    Criterion.BROAD_APPEAL: ("appealBreadth",),
    Criterion.AUTHENTICITY: ("authenticityLevel",),
}


def extension_fields(criterion: Criterion | str | None) -> tuple[str, ...]:
    """Names of the criterion-specific fields the prompt asks for."""
    return _EXTENSION_FIELDS.get(Criterion.resolve(criterion), ())


__all__ = ["build_analysis_prompt", "extension_fields"]
