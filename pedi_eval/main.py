"""Main entry point for PediEval."""

import logging
import sys

from pedi_eval.config import get_settings


def setup_logging():
    """Configure logging based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main():
    """Main entry point - runs CLI."""
    setup_logging()

    from pedi_eval.cli.commands import app

    app()


def assess_file(path: str, with_diagnosis: bool = False) -> dict:
    """Programmatic API for scoring a snapshot stored as JSON.

    Example:
        from pedi_eval.main import assess_file

        result = assess_file("evaluation.json", with_diagnosis=True)
        print(result["assessment"]["torticollis"]["grade"])
    """
    from pathlib import Path

    from pedi_eval import assess, compose_diagnosis
    from pedi_eval.models.snapshot import EvaluationSnapshot

    snapshot = EvaluationSnapshot.model_validate_json(Path(path).read_text())
    assessment = assess(snapshot)
    result = {"assessment": assessment.model_dump(mode="json")}
    if with_diagnosis:
        result["diagnosis"] = compose_diagnosis(snapshot, assessment).model_dump(mode="json")
    return result


if __name__ == "__main__":
    main()
