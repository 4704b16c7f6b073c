"""
Load and apply manual step text overrides from YAML.

This module handles loading user-provided step overrides and applying
them to the default narrative steps. Users can replace the headline or
the text of any step while keeping the rest generated.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from scrollvis.essays.base import ScrollyStep

logger = logging.getLogger(__name__)

OVERRIDE_FIELDS = ("headline", "text")


# =============================================================================
# OVERRIDE LOADING
# =============================================================================


def load_overrides(path: Path | str) -> dict[int, dict[str, str | None]]:
    """Load step overrides from a YAML file.

    Expected YAML format:
    ```yaml
    steps:
      0:
        headline: "Custom headline here"
        text: null  # Use generated text
      3:
        text: "Custom text for the bar chart step"
    ```

    Args:
        path: Path to the YAML override file

    Returns:
        Dictionary mapping step number to override fields

    Raises:
        FileNotFoundError: If the override file doesn't exist
        yaml.YAMLError: If the YAML is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Override file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    steps = data.get("steps", {}) if isinstance(data, dict) else None

    if not isinstance(steps, dict):
        logger.warning("Invalid 'steps' section in override file, expected dict")
        return {}

    result: dict[int, dict[str, str | None]] = {}

    for step_id, overrides in steps.items():
        try:
            step_number = int(step_id)
        except (TypeError, ValueError):
            logger.warning(f"Invalid step number {step_id!r} in override file")
            continue

        if not isinstance(overrides, dict):
            logger.warning(f"Invalid overrides for step {step_number}, expected dict")
            continue

        result[step_number] = {name: overrides.get(name) for name in OVERRIDE_FIELDS}

    return result


def load_overrides_safe(path: Path | str | None) -> dict[int, dict[str, str | None]]:
    """Load overrides, returning empty dict if the file is missing or invalid.

    Args:
        path: Path to override file, or None

    Returns:
        Override dictionary, or empty dict if path is None or file can't be loaded
    """
    if path is None:
        return {}

    try:
        return load_overrides(path)
    except FileNotFoundError:
        logger.info(f"No override file found at {path}")
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"Invalid YAML in override file {path}: {e}")
        return {}


# =============================================================================
# OVERRIDE APPLICATION
# =============================================================================


def apply_overrides(
    steps: list[ScrollyStep],
    overrides: dict[int, dict[str, str | None]],
) -> list[ScrollyStep]:
    """Apply manual overrides to the narrative steps.

    Args:
        steps: Narrative steps
        overrides: Override values from YAML

    Returns:
        The same steps list, with overrides applied in place
    """
    known = {step.step_number for step in steps}
    for step_number in overrides:
        if step_number not in known:
            logger.warning(f"Override for unknown step {step_number} ignored")

    for step in steps:
        step_overrides = overrides.get(step.step_number)
        if not step_overrides:
            continue

        if step_overrides.get("headline") is not None:
            step.headline = step_overrides["headline"]

        if step_overrides.get("text") is not None:
            step.narrative_text = step_overrides["text"]

    return steps


# =============================================================================
# EXPORT FUNCTIONS
# =============================================================================


def export_steps_to_yaml(steps: list[ScrollyStep], path: Path | str) -> None:
    """Export the current step text to YAML for editing.

    Args:
        steps: Narrative steps
        path: Path to write the YAML file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    export_data: dict[str, Any] = {
        "steps": {
            step.step_number: {"headline": step.headline, "text": step.narrative_text}
            for step in steps
        }
    }

    with open(path, "w") as f:
        f.write("# Scroll step overrides\n")
        f.write("# Edit any field to override the generated text\n")
        f.write("# Set to null or delete to use generated text\n\n")

        yaml.dump(
            export_data,
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=100,
        )

    logger.info(f"Exported step text to {path}")
