"""Prompts sent to the AI coach."""

EXTRACTION_PROMPT = """Analyze the whole document provided (PDF or image). It contains a workout plan.

GOAL: find out whether the plan is split into several days/routines and return each one separately.

Return ONLY a JSON array, no prose. Each element:
{
  "routineName": "Day A - Push",
  "exercises": [
    {
      "name": "Bench Press",
      "sets": 4,
      "reps": "8-10",
      "muscleGroup": "Chest",
      "notes": "pause at the bottom",
      "restTime": 90
    }
  ]
}

RULES:
- "sets" and "restTime" are whole numbers; "restTime" is in seconds
- "reps" is text and may be a range ("8-12") or a duration ("30s")
- leave out "notes" and "restTime" when the sheet does not give them
- if the sheet has a single routine, return an array with one element
"""

EXPLAIN_PROMPT = """Briefly explain how to perform the exercise "{name}" for "{muscle_group}" correctly.
Give 3 key points and one safety tip."""

CHAT_SYSTEM_PROMPT = """You are an encouraging, knowledgeable gym coach.
Answer questions about training, technique and recovery concisely.
If something may be dangerous, say so clearly."""

QUOTE_PROMPT = "Write one short motivational quote for the gym. Reply with the quote only."
