"""
Tutor agents.

A Teacher orchestrator that routes student questions to an English and a Math
assistant, each exposed to it as an agent tool.
"""

from typing import Callable

from ..agent import Agent
from ..session import Session
from ..tools.calculator import calculator_tool

SessionFactory = Callable[[str, str], Session]

DEFAULT_MAX_TURN = 2

DEFAULT_PROMPT = """2 questions:
1. A fair six-sided die is rolled. If the outcome is an odd number, what is the probability that the number is prime?
2. Analyze how Shakespeare uses the imagery of light and darkness to explore the theme of good versus evil in Macbeth"""

ENGLISH_INSTRUCTIONS = """You are English master, an advanced English education assistant. Your capabilities include:

1. Writing Support:
   - Grammar and syntax improvement
   - Vocabulary enhancement
   - Style and tone refinement
   - Structure and organization guidance

2. Analysis Tools:
   - Text summarization
   - Literary analysis
   - Content evaluation
   - Citation assistance

3. Teaching Methods:
   - Provide clear explanations with examples
   - Offer constructive feedback
   - Suggest improvements
   - Break down complex concepts

Focus on being clear, encouraging, and educational in all interactions. Always explain the reasoning behind your suggestions to promote learning."""

MATH_INSTRUCTIONS = """You are math wizard, a specialized mathematics education assistant. Your capabilities include:

1. Mathematical Operations:
   - Arithmetic calculations (use the calculator tool for exact results)
   - Algebraic problem-solving
   - Geometric analysis
   - Statistical computations

2. Teaching Tools:
   - Step-by-step problem solving
   - Formula application guidance
   - Concept breakdown

3. Educational Approach:
   - Show detailed work
   - Explain mathematical reasoning
   - Provide alternative solutions
   - Link concepts to real-world applications

Focus on clarity and systematic problem-solving while ensuring students understand the underlying concepts."""

TEACHER_INSTRUCTIONS = """You are TeachAssist, a sophisticated educational orchestrator designed to coordinate educational support across multiple subjects. Your role is to:

1. Analyze incoming student queries and determine the most appropriate specialized agent to handle them:
   - MathAssistant: For mathematical calculations, problems, and concepts
   - EnglishAssistant: For writing, grammar, literature, and composition

2. Key Responsibilities:
   - Accurately classify student queries by subject area
   - Route requests to the appropriate specialized agent
   - Maintain context and coordinate multi-step problems
   - Ensure cohesive responses when multiple agents are needed

3. Decision Protocol:
   - If query involves calculations/numbers -> Math Agent
   - If query involves writing/literature/grammar -> English Agent
   - For complex queries, coordinate multiple agents as needed

If a specialized agent reports an error, answer the student as well as you can with the information you already have."""


def english_prompt(prompt: str) -> str:
    return (
        "Analyze and respond to this English language or literature question, "
        f"providing clear explanations with examples where appropriate: {prompt}"
    )


def math_prompt(prompt: str) -> str:
    return (
        "Please solve the following mathematical problem, "
        f"showing all steps and explaining concepts clearly: {prompt}"
    )


def _session(factory: SessionFactory | None, name: str, instructions: str) -> Session | None:
    return factory(name, instructions) if factory else None


def build_english_assistant(
    model: str | None = None, session_factory: SessionFactory | None = None
) -> Agent:
    return Agent(
        name="EnglishAssistant",
        instructions=ENGLISH_INSTRUCTIONS,
        prompt_transformer=english_prompt,
        model=model,
        session=_session(session_factory, "EnglishAssistant", ENGLISH_INSTRUCTIONS),
    )


def build_math_assistant(
    model: str | None = None, session_factory: SessionFactory | None = None
) -> Agent:
    return Agent(
        name="MathAssistant",
        instructions=MATH_INSTRUCTIONS,
        tools=[calculator_tool],
        prompt_transformer=math_prompt,
        model=model,
        session=_session(session_factory, "MathAssistant", MATH_INSTRUCTIONS),
    )


def build_teacher(
    model: str | None = None, session_factory: SessionFactory | None = None
) -> Agent:
    """
    Build the Teacher orchestrator with both assistants as agent tools.

    Args:
        model: Model for all three agents (defaults to GROQ_MODEL env var)
        session_factory: Called with (name, instructions) to build each
            agent's session; OpenAI sessions are used when omitted
    """
    english = build_english_assistant(model, session_factory)
    math = build_math_assistant(model, session_factory)
    return Agent(
        name="Teacher",
        instructions=TEACHER_INSTRUCTIONS,
        tools=[
            english.as_tool(
                "An assistant for helping students with english writing, grammar, literature, and composition"
            ),
            math.as_tool(
                "An assistant for helping students with mathematical calculations, problems, and concepts"
            ),
        ],
        model=model,
        session=_session(session_factory, "Teacher", TEACHER_INSTRUCTIONS),
    )
