"""
Tool: Smart Task Suggestions
Purpose: Refine a vague task into a SMART one using an LLM

Takes what the user has typed so far (title, description, category, due
date, extra context) and asks the model for a Specific, Measurable,
Achievable, Relevant and Timely version, optionally broken into subtasks.
The suggestion is only returned; the user decides whether to apply it.

Usage:
    python -m taskboard.tasks.suggest --user alice --title "get fit"
    python -m taskboard.tasks.suggest --user alice --title "make soup" --breakdown --task-id abc123

Dependencies:
    - anthropic (LLM client)
    - pydantic (response validation)
    - pyyaml (model selection from args/taskboard.yaml)

Output:
    JSON suggestion
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .categories import get_categories
from .errors import InternalError, TaskboardError, ValidationError
from .manager import get_task, record_interaction
from .store import load_config

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-latest"
DEFAULT_MAX_TOKENS = 1024

SYSTEM_PROMPT = """You are a SMART goal assistant that helps users create better-defined tasks.
Take the task information and return an improved version that is:

Specific: clear, unambiguous and actionable
Measurable: concrete success criteria that can be checked off
Achievable: realistic scope with clear deliverables
Relevant: meaningful in the given category and context
Timely: a realistic deadline based on the current date

Timing guidelines: small tasks (groceries, calls) same day to 2 days; medium
tasks (repairs, short projects) 3-7 days; large tasks (learning, fitness)
2-4 weeks; complex tasks should be broken into subtasks.

Respond only with JSON of this shape:
{
  "title": "specific and actionable task title",
  "description": "what, why and how, preferably as bullet points",
  "suggestedDueDate": "ISO date string",
  "measurementCriteria": ["checkable item", "..."],
  "suggestedCategory": "name of an existing category, or null",
  "subtasks": [{"title": "...", "description": "...", "estimatedDuration": "in days"}],
  "confidence": 0.9
}
"""

BREAKDOWN_INSTRUCTIONS = """
Break the work into sequential subtasks that can be created as separate tasks.
Each subtask must be independently actionable, due dates should progress
logically, and estimatedDuration helps with scheduling.
"""


class SmartTaskInput(BaseModel):
    """What the user has entered so far."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    due_date: Optional[str] = None
    additional_context: Optional[str] = None
    should_breakdown: bool = False


class SmartSubtask(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    estimated_duration: Optional[str] = Field(None, alias="estimatedDuration")
    suggested_due_date: Optional[str] = Field(None, alias="suggestedDueDate")


class SmartTaskSuggestion(BaseModel):
    """An LLM-refined version of a task."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    suggested_due_date: Optional[str] = Field(None, alias="suggestedDueDate")
    measurement_criteria: List[str] = Field(default_factory=list, alias="measurementCriteria")
    suggested_category: Optional[str] = Field(None, alias="suggestedCategory")
    subtasks: List[SmartSubtask] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)


def construct_prompt(task_input: SmartTaskInput) -> str:
    """Build the user message for a suggestion request."""
    prompt = f"""Please help improve this task using SMART criteria:
Current Date: {datetime.now().isoformat()}
Title: {task_input.title or 'Not provided'}
Description: {task_input.description or 'Not provided'}
Current Category: {task_input.category or 'Not specified'}
Available Categories: {', '.join(task_input.categories) or 'None'}
Due Date: {task_input.due_date or 'Not specified'}
Additional Context: {task_input.additional_context or 'None'}

Please make this task more SMART by:
1. Making the title specific and actionable
2. Breaking down the work into measurable deliverables with clear steps
3. Ensuring the scope is achievable{' and suggesting related tasks' if task_input.should_breakdown else ''}
4. Explaining relevance to the category/context
5. Suggesting a realistic timeline based on the current date
6. Recommending an existing category if appropriate"""

    if task_input.should_breakdown:
        prompt += "\n" + BREAKDOWN_INSTRUCTIONS
    return prompt


def extract_json(response_text: str) -> Dict[str, Any]:
    """Pull the JSON object out of a model reply, tolerating code fences."""
    response_text = response_text.strip()
    if "```json" in response_text:
        response_text = response_text.split("```json")[1].split("```")[0]
    elif "```" in response_text:
        response_text = response_text.split("```")[1].split("```")[0]
    return json.loads(response_text)


def request_suggestion(prompt: str) -> str:
    """Send the prompt to the LLM and return the raw text reply."""
    try:
        import anthropic
    except ImportError:
        raise InternalError("anthropic package not installed. Run: pip install anthropic")

    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise InternalError("Smart suggestions are not configured")

    config = load_config().get("taskboard", {}).get("suggestions", {})
    model = config.get("llm_model", DEFAULT_MODEL)
    max_tokens = config.get("max_tokens", DEFAULT_MAX_TOKENS)

    client = anthropic.Anthropic(api_key=api_key)
    try:
        message = client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": f"{prompt}\n\nRespond with valid JSON only."}],
        )
    except anthropic.APIError as e:
        logger.error(f"Suggestion request failed: {e}")
        raise InternalError("Smart suggestions are temporarily unavailable") from e

    return message.content[0].text


def get_smart_task_suggestions(
    user_id: str,
    task_input: SmartTaskInput,
    task_id: Optional[str] = None,
) -> SmartTaskSuggestion:
    """
    Ask the LLM for a SMART version of a task.

    Args:
        user_id: Requesting user; their category names are offered to the model
        task_input: Current task fields and extra context
        task_id: Existing task to record the suggestion against

    Returns:
        Validated suggestion; ``suggested_category`` is None unless it names
        one of the user's categories
    """
    if not (task_input.title or "").strip() and not (task_input.description or "").strip():
        raise ValidationError("Provide a title or description to improve")

    if task_id:
        # Ownership is checked before the model call
        get_task(user_id, task_id)

    if not task_input.categories:
        names = [c["name"] for c in get_categories(user_id, include_tasks=False)]
        task_input = task_input.model_copy(update={"categories": names})

    response_text = request_suggestion(construct_prompt(task_input))

    try:
        suggestion = SmartTaskSuggestion.model_validate(extract_json(response_text))
    except (json.JSONDecodeError, IndexError, pydantic.ValidationError) as e:
        logger.error(f"Unusable suggestion response: {e}")
        raise InternalError("Could not understand the suggestion, please try again") from e

    if suggestion.suggested_category not in task_input.categories:
        suggestion.suggested_category = None

    if task_id:
        record_interaction(user_id, task_id, "LLM_SUGGESTION", suggestion.model_dump_json(by_alias=True))

    logger.info(f"Suggestion for user {user_id} (confidence {suggestion.confidence})")
    return suggestion


def main():
    parser = argparse.ArgumentParser(description="Smart Task Suggestions - refine a task with an LLM")
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--title", help="Current task title")
    parser.add_argument("--description", help="Current task description")
    parser.add_argument("--category", help="Current category name")
    parser.add_argument("--due", help="Current due date")
    parser.add_argument("--context", help="Additional context for the model")
    parser.add_argument("--breakdown", action="store_true", help="Suggest subtasks")
    parser.add_argument("--task-id", help="Record the suggestion against this task")

    args = parser.parse_args()

    task_input = SmartTaskInput(
        title=args.title,
        description=args.description,
        category=args.category,
        due_date=args.due,
        additional_context=args.context,
        should_breakdown=args.breakdown,
    )

    try:
        suggestion = get_smart_task_suggestions(args.user, task_input, task_id=args.task_id)
        result = {"success": True, "data": suggestion.model_dump(by_alias=True)}
    except TaskboardError as e:
        result = e.to_dict()

    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
