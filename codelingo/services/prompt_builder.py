"""
Builds code conversion prompts for CodeLingo.

Prompt file structure (optional, under prompts_dir):
- convert_code.txt: Conversion request template

The template receives {target_language} and {source_code} placeholders.
When the file does not exist the built-in DEFAULT_CONVERT_TEMPLATE is used.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from codelingo.models.types import TargetLanguage

logger = logging.getLogger(__name__)

CONVERT_TEMPLATE_FILENAME = "convert_code.txt"

# Source code goes last so nothing after it can be mistaken for code
DEFAULT_CONVERT_TEMPLATE = (
    "Convert the following code into {target_language}. "
    "Only return the converted code, no explanations.\n"
    "\n"
    "Code:\n"
    "{source_code}"
)


class PromptBuilder:
    """
    Builds conversion prompts from a template.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir
        self._template = self._load_template()

    def _load_template(self) -> str:
        if self.prompts_dir is None:
            return DEFAULT_CONVERT_TEMPLATE

        template_path = self.prompts_dir / CONVERT_TEMPLATE_FILENAME
        if not template_path.exists():
            return DEFAULT_CONVERT_TEMPLATE

        try:
            template = template_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load prompt template %s: %s", template_path, e)
            return DEFAULT_CONVERT_TEMPLATE

        if "{source_code}" not in template or "{target_language}" not in template:
            logger.warning(
                "Prompt template %s is missing placeholders, using default", template_path
            )
            return DEFAULT_CONVERT_TEMPLATE

        logger.debug("Loaded prompt template from: %s", template_path)
        return template

    @property
    def template(self) -> str:
        return self._template

    def build(self, source_code: str, target_language: Union[TargetLanguage, str]) -> str:
        """
        Build the conversion prompt.

        Args:
            source_code: Code to convert (inserted verbatim)
            target_language: Target language enum or display name

        Returns:
            Complete prompt
        """
        if isinstance(target_language, TargetLanguage):
            target_language = target_language.value

        # Plain replace instead of str.format so braces in the code survive
        prompt = self._template.replace("{target_language}", target_language)
        return prompt.replace("{source_code}", source_code)
