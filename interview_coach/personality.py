import logging
from typing import Dict, Iterable, List, Optional

import regex as re

from .schemas import PersonalityProfile, PersonalityTrait

logger = logging.getLogger('personality')

BASE_SCORE = 50
POINTS_PER_HIT = 5
MAX_KEYWORD_BONUS = 40
LONG_SENTENCE_CHARS = 20
COMMUNICATION_BONUS = 10
FIRST_PERSON_RATIO = 0.05
CONFIDENCE_BONUS = 10

TRAIT_KEYWORDS: Dict[str, List[str]] = {
    'analytical': [
        "analyze", "data", "logical", "research", "evaluate",
        "assessment", "metrics", "systematic", "objective", "rational",
    ],
    'creative': [
        "creative", "innovative", "design", "new ideas", "imagination",
        "artistic", "unique", "original", "brainstorm", "vision",
    ],
    'detail_oriented': [
        "detail", "thorough", "precise", "accurate", "meticulous",
        "organized", "careful", "methodical", "exact", "specific",
    ],
    'leadership': [
        "lead", "manage", "direct", "guide", "influence",
        "motivate", "inspire", "vision", "strategy", "decision",
    ],
    'teamwork': [
        "team", "collaborate", "together", "cooperation", "collective",
        "partnership", "joint", "group", "support", "assist",
    ],
    'communication': [
        "communicate", "explain", "articulate", "present", "discuss",
        "convey", "express", "clarify", "dialogue", "conversation",
    ],
    'adaptability': [
        "adapt", "flexible", "adjust", "change", "versatile",
        "resilient", "agile", "pivot", "responsive", "dynamic",
    ],
    'problem_solving': [
        "solve", "solution", "resolve", "address", "fix",
        "troubleshoot", "overcome", "tackle", "approach", "strategy",
    ],
    'confidence': [
        "confident", "certain", "assured", "self-assured", "conviction",
        "decisive", "assertive", "bold", "strong", "sure",
    ],
    'empathy': [
        "understand", "perspective", "feelings", "compassion", "empathize",
        "listen", "care", "sensitive", "considerate", "supportive",
    ],
}

# Display order of the report; scores are keyed by the TRAIT_KEYWORDS ids
TRAIT_DEFINITIONS = [
    {
        'id': 'analytical',
        'name': "Analytical Thinking",
        'description': (
            "Your ability to examine information or situations methodically, breaking them "
            "down into components, and evaluating them logically."
        ),
        'strengths': [
            "Strong data-driven decision making",
            "Ability to identify patterns and insights",
            "Logical approach to problem-solving",
        ],
        'improvements': [
            "Balance analysis with intuition when appropriate",
            "Communicate analytical findings in accessible ways",
            "Don't get lost in details at the expense of the big picture",
        ],
    },
    {
        'id': 'creative',
        'name': "Creativity",
        'description': (
            "Your ability to generate original ideas, think outside conventional frameworks, "
            "and develop innovative solutions."
        ),
        'strengths': [
            "Innovative approach to challenges",
            "Ability to envision new possibilities",
            "Thinking beyond conventional solutions",
        ],
        'improvements': [
            "Balance creativity with practicality",
            "Structure your creative process for better outcomes",
            "Communicate the value of creative solutions to stakeholders",
        ],
    },
    {
        'id': 'detail_oriented',
        'name': "Detail Orientation",
        'description': (
            "Your capacity to pay close attention to small elements and ensure accuracy "
            "and thoroughness in your work."
        ),
        'strengths': [
            "Thorough and precise work output",
            "Ability to catch errors and inconsistencies",
            "Methodical approach to tasks",
        ],
        'improvements': [
            "Balance attention to detail with efficiency",
            "Don't lose sight of the bigger picture",
            "Develop systems to manage details without becoming overwhelmed",
        ],
    },
    {
        'id': 'leadership',
        'name': "Leadership",
        'description': (
            "Your ability to guide, influence, and inspire others toward achieving goals "
            "and objectives."
        ),
        'strengths': [
            "Ability to motivate and inspire teams",
            "Strategic vision and direction-setting",
            "Decision-making capabilities",
        ],
        'improvements': [
            "Develop a more inclusive leadership style",
            "Balance directing with empowering others",
            "Improve delegation skills",
        ],
    },
    {
        'id': 'teamwork',
        'name': "Teamwork",
        'description': (
            "Your ability to collaborate effectively with others, contribute to group "
            "efforts, and support collective goals."
        ),
        'strengths': [
            "Collaborative approach to projects",
            "Supportive of team members",
            "Ability to leverage diverse perspectives",
        ],
        'improvements': [
            "Balance team consensus with timely decision-making",
            "Improve conflict resolution within teams",
            "Develop strategies for working with different personality types",
        ],
    },
    {
        'id': 'communication',
        'name': "Communication",
        'description': (
            "Your ability to convey information clearly, listen effectively, and adapt "
            "your communication style to different audiences."
        ),
        'strengths': [
            "Clear and articulate expression of ideas",
            "Ability to tailor communication to the audience",
            "Active listening skills",
        ],
        'improvements': [
            "Practice more concise communication",
            "Improve non-verbal communication awareness",
            "Develop storytelling techniques for more engaging communication",
        ],
    },
    {
        'id': 'adaptability',
        'name': "Adaptability",
        'description': (
            "Your ability to adjust to new conditions, handle change effectively, and "
            "remain flexible in various situations."
        ),
        'strengths': [
            "Flexibility in changing circumstances",
            "Openness to new approaches and ideas",
            "Resilience in the face of challenges",
        ],
        'improvements': [
            "Develop strategies for managing stress during change",
            "Balance adaptability with consistency where needed",
            "Improve anticipation of potential changes",
        ],
    },
    {
        'id': 'problem_solving',
        'name': "Problem Solving",
        'description': (
            "Your ability to identify issues, develop solutions, and implement effective "
            "resolutions to challenges."
        ),
        'strengths': [
            "Methodical approach to addressing challenges",
            "Creative solution development",
            "Persistence in resolving complex issues",
        ],
        'improvements': [
            "Consider a wider range of potential solutions",
            "Improve root cause analysis techniques",
            "Balance quick fixes with sustainable solutions",
        ],
    },
    {
        'id': 'confidence',
        'name': "Confidence",
        'description': (
            "Your self-assurance, conviction in your abilities, and comfort in expressing "
            "your views and taking action."
        ),
        'strengths': [
            "Self-assured presentation style",
            "Willingness to take on challenges",
            "Ability to make decisions with conviction",
        ],
        'improvements': [
            "Balance confidence with openness to feedback",
            "Develop strategies for situations that challenge your confidence",
            "Practice authentic confidence rather than overcompensation",
        ],
    },
    {
        'id': 'empathy',
        'name': "Empathy",
        'description': (
            "Your ability to understand others' perspectives, recognize their feelings, "
            "and respond appropriately to their needs."
        ),
        'strengths': [
            "Strong understanding of others' perspectives",
            "Ability to build rapport and trust",
            "Sensitivity to team dynamics and individual needs",
        ],
        'improvements': [
            "Balance empathy with necessary directness",
            "Develop boundaries to prevent emotional exhaustion",
            "Translate empathetic understanding into effective action",
        ],
    },
]

FIRST_PERSON_PATTERN = re.compile(r'\bi\b|\bme\b|\bmy\b|\bmyself\b', re.IGNORECASE)


class PersonalityAnalyzer:
    """Keyword heuristics over a candidate's combined answers.

    Every trait starts at a neutral 50. Keyword hits, sentence length and the
    share of first-person pronouns nudge the scores up; nothing lowers them.
    """

    def __init__(self, keywords: Optional[Dict[str, List[str]]] = None):
        self.keyword_patterns = {
            trait: [re.compile(rf'\b{re.escape(word)}\b', re.IGNORECASE) for word in words]
            for trait, words in (keywords or TRAIT_KEYWORDS).items()
        }

    def score_traits(self, text: str) -> Dict[str, int]:
        scores = {trait: BASE_SCORE for trait in TRAIT_KEYWORDS}

        for trait, patterns in self.keyword_patterns.items():
            hits = sum(len(pattern.findall(text)) for pattern in patterns)
            if hits:
                scores[trait] = scores.get(trait, BASE_SCORE) + min(hits * POINTS_PER_HIT, MAX_KEYWORD_BONUS)

        sentences = [s.strip() for s in re.split(r'[.!?]+', text) if s.strip()]
        if sentences:
            avg_sentence_length = sum(len(s) for s in sentences) / len(sentences)
            if avg_sentence_length > LONG_SENTENCE_CHARS:
                scores['communication'] += COMMUNICATION_BONUS

        word_count = len(text.split())
        if word_count:
            first_person = len(FIRST_PERSON_PATTERN.findall(text))
            if first_person / word_count > FIRST_PERSON_RATIO:
                scores['confidence'] += CONFIDENCE_BONUS

        return {trait: max(0, min(100, score)) for trait, score in scores.items()}

    def analyze(self, answers: Iterable[Optional[str]]) -> PersonalityProfile:
        text = " ".join(a or "" for a in answers).lower()
        scores = self.score_traits(text)

        traits = [
            PersonalityTrait(
                name=definition['name'],
                score=scores[definition['id']],
                description=definition['description'],
                strengths=list(definition['strengths']),
                improvements=list(definition['improvements']),
            )
            for definition in TRAIT_DEFINITIONS
        ]
        # sorted() is stable, so equal scores keep the definition order
        ranked = sorted(traits, key=lambda t: -t.score)
        dominant = [t.name for t in ranked[:3]]
        lowest = ranked[-2:]

        logger.debug(f"Personality scores: {scores}")

        return PersonalityProfile(
            dominant_traits=dominant,
            traits=ranked,
            summary=self.build_summary(ranked, lowest),
            interview_tips=self.build_tips(ranked, lowest),
        )

    @staticmethod
    def build_summary(ranked: List[PersonalityTrait], lowest: List[PersonalityTrait]) -> str:
        top, second = ranked[0], ranked[1]
        return (
            f"Your responses indicate that you have particularly strong {top.name} and {second.name} traits. "
            f"You communicate in a way that demonstrates {top.name.lower()} and {second.name.lower()}. "
            f"You might benefit from developing your {lowest[0].name.lower()} and "
            f"{lowest[1].name.lower()} skills further."
        )

    @staticmethod
    def build_tips(ranked: List[PersonalityTrait], lowest: List[PersonalityTrait]) -> List[str]:
        top, second = ranked[0].name, ranked[1].name
        weakest = lowest[0].name.lower()
        return [
            f"Leverage your strong {top} when answering questions about your work style and achievements.",
            f"Be prepared to discuss situations that required {weakest}, as interviewers may probe this area.",
            f"Use specific examples that highlight your {second} when discussing past experiences.",
            f"Consider how your {top} might be perceived - ensure you're presenting it as a balanced strength.",
            f"Prepare stories that demonstrate how you've worked to improve your {weakest} in professional settings.",
        ]


_default_analyzer = PersonalityAnalyzer()


def analyze_personality(answers: Iterable[Optional[str]]) -> PersonalityProfile:
    return _default_analyzer.analyze(answers)
