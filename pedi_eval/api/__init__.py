"""HTTP boundary for the evaluation-editing UI."""
