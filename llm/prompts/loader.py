"""Prompt loading and rendering from YAML files."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from logger import get_logger

logger = get_logger()

_REQUIRED_KEYS = ("system_prompt", "user_prompt_template")


class PromptManager:
    """Loads prompt definitions from YAML files and fills in their templates.

    A prompt file holds a system prompt, a user prompt template with
    {placeholders}, model parameters and a version string.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        """Initialize the prompt manager.

        Args:
            prompts_dir: Directory containing prompt YAML files.
                        Defaults to the directory of this module.
        """
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_prompt(self, prompt_name: str) -> Dict[str, Any]:
        """Load (and cache) a prompt definition.

        Args:
            prompt_name: Name of the prompt file (without .yaml extension).

        Raises:
            FileNotFoundError: If prompt file doesn't exist.
            ValueError: If a required key is missing.
            yaml.YAMLError: If YAML is invalid.
        """
        if prompt_name not in self._cache:
            prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
            if not prompt_file.exists():
                raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

            logger.info(f"Loading prompt from {prompt_file}")
            with open(prompt_file, "r", encoding="utf-8") as f:
                prompt_config = yaml.safe_load(f) or {}

            missing = [key for key in _REQUIRED_KEYS if key not in prompt_config]
            if missing:
                raise ValueError(
                    f"Prompt '{prompt_name}' is missing: {', '.join(missing)}"
                )
            self._cache[prompt_name] = prompt_config

        return self._cache[prompt_name]

    def render_prompt(
        self, prompt_name: str, variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Load a prompt and substitute the given variables.

        Returns:
            Dictionary with keys: system_prompt, user_prompt, parameters, version.

        Raises:
            KeyError: If the template uses a variable that wasn't provided.
        """
        prompt_config = self.load_prompt(prompt_name)

        return {
            "system_prompt": prompt_config["system_prompt"],
            "user_prompt": prompt_config["user_prompt_template"].format_map(variables),
            "parameters": prompt_config.get("parameters") or {},
            "version": prompt_config.get("version", "unknown"),
        }
