"""AI collaborator: workout-sheet extraction, explanations, chat and quotes."""
