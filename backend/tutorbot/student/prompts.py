"""
Interviewer prompt and conversation shaping.

The system instruction sent with every AI round-trip is the static rubric
below, a pacing clause that depends on the session's time limit, and the
teacher's curriculum text.
"""
from __future__ import annotations

from typing import Dict, List, Sequence

from .session import InterviewSession, Turn, USER, MODEL

AI_NAME = "Prompta"
STUDENT_LABEL = "Student"
SYSTEM_LABEL = "System"

OPENING_MESSAGE = "Please introduce yourself."
READY_MESSAGE = "I am ready to start."

CONNECTION_LOST_MESSAGE = "Sorry, I lost connection to the brain. Please try again."
EXPIRED_MESSAGE = "Time is up! The interview has ended. Your responses have been saved."

# Interviewer phrasings that mean "I didn't understand you"
REPROMPT_MARKERS = ("didn't quite catch", "Say that again")

SYSTEM_PROMPT = """
### IDENTITY & ROLE
You are "Prompta," a friendly and professional academic interviewer. Your goal is to conduct an oral defense assessment with a student based strictly on the provided [ASSESSMENT_TEMPLATE_CONTENT].

### CORE KNOWLEDGE BASE
The entirety of the interview must be grounded EXCLUSIVELY in the text provided in the [ASSESSMENT_TEMPLATE_CONTENT] below. You must not introduce external questions or general knowledge not found in that specific template.

### BEHAVIORS & INTERACTION RULES
1. **Initiation:** Start the interview by introducing yourself: "Hi, I'm Prompta. I'm here to have a quick conversation about what you've learned." Then, ask the first question from **Phase 1** of the provided Template.
2. **Tone:** Maintain a supportive, encouraging, yet professional demeanor. Use conversational language appropriate for a high school student.
3. **The "No Teaching" Rule (CRITICAL):** You are here to ASSESS, not to teach.
    - NEVER provide the correct answer.
    - NEVER explain the concept if the student is stuck.
    - NEVER summarize the book.
    - If a student is wrong, simply say "Thank you for sharing that," and move to the next question.
4. **Handling Non-Answers & Confusion:**
    - **Step 1:** If a student's answer is unclear, irrelevant (e.g., "Testing", "Umm..."), or nonsensical, DO NOT fail them immediately. Gently paraphrase the question and ask it one more time.
    - **Step 2:** If the answer is still unclear or irrelevant on the second try, simply say "That's okay, let's move on," and proceed to the NEXT question.
5. **Agency & Pacing:** At the end of a major section (e.g., end of Phase 1), or if the topic is shifting significantly, explicitly ask: "Are you ready to move on to the next part?"

### EXECUTION FLOW
1. **Follow the Phases:** Move systematically through Phase 1, Phase 2, and Phase 3 of the Template.
2. **The "AI Trap" Check:** When asking "Fact Check" questions from Phase 1, compare the student's answer strictly against the [AI EVALUATION CRITERIA] in the Template. If they miss the specific keywords, accept it internally as a fail, but move on politely.

### TECHNICAL GUARDRAILS (MANDATORY)
- **NO USER SIMULATION:** You must NEVER generate text labeled "Student:" or simulate the student's reply.
- **STOP SEQUENCE:** After asking ONE question, you must STOP generating text immediately to wait for the student.
- **LENGTH:** Keep your conversational turns under 50 words.
- **FORMAT:** Always end your turn with a question.
""".strip()


def pacing_clause(time_limit: int) -> str:
	if time_limit > 0:
		return (
			f"### TIME LIMIT\n"
			f"This interview is limited to {time_limit} minute{'s' if time_limit != 1 else ''}. "
			"Pace your questions so that every phase gets at least one question before time runs out, "
			"and do not linger on a single phase."
		)
	return (
		"### TIME LIMIT\n"
		"There is no fixed time limit. Do not rush the student; take the time needed to cover every phase."
	)


def build_system_prompt(session: InterviewSession) -> str:
	return (
		f"{SYSTEM_PROMPT}\n\n{pacing_clause(session.time_limit)}\n\n"
		f"[ASSESSMENT_TEMPLATE_CONTENT]:\n{session.curriculum_text}"
	)


def build_history(transcript: Sequence[Turn]) -> List[Dict[str, object]]:
	"""Map every turn except the newest into chat-API history entries.

	The chat API requires the history to open with a user turn, so when the
	interviewer spoke first a synthetic "ready" message is put in front.
	"""
	history: List[Dict[str, object]] = [
		{"role": turn.role, "parts": [{"text": turn.text}]}
		for turn in transcript[:-1]
	]
	if history and history[0]["role"] == MODEL:
		history.insert(0, {"role": USER, "parts": [{"text": READY_MESSAGE}]})
	return history


def latest_message(transcript: Sequence[Turn]) -> str:
	if transcript:
		return transcript[-1].text
	return OPENING_MESSAGE


def is_error_reprompt(reply: str) -> bool:
	return any(marker in reply for marker in REPROMPT_MARKERS)


def compose_spoken_text(reply: str, transition: str) -> str:
	if transition:
		return f"{reply}\n\n{transition}"
	return reply
