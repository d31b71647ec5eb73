"""StackIt question-and-answer API."""
